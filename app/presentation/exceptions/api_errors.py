"""
Presentation層のAPIエラー

ドメインエラーをHTTPステータスと標準エラーレスポンスに変換する。
"""

from typing import Any, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel

from ...domain.exceptions.base import (
    BackupUploadError,
    BadRequestError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    RestoreError,
    UnauthorizedError,
)

# ドメインエラー→HTTPステータス（サブクラスは親のステータスを引き継ぐ）
STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    BackupUploadError: status.HTTP_502_BAD_GATEWAY,
    RestoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ErrorResponse(BaseModel):
    """
    標準エラーレスポンス

    Attributes:
        status: ステータス（常に"error"）
        code: エラーコード
        message: エラーメッセージ
        details: エラーの詳細情報（オプション）
    """

    status: str = "error"
    code: str
    message: str
    details: Optional[list[dict[str, Any]] | dict[str, Any]] = None


class APIError(HTTPException):
    """
    HTTPレスポンスとして返すエラー

    Attributes:
        status_code: HTTPステータスコード
        error_code: エラーコード
        error_message: エラーメッセージ
        details: エラーの詳細情報
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_server_error"
    error_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[list[dict[str, Any]] | dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.error_message = message or self.error_message
        self.error_code = error_code or self.error_code
        self.details = details
        super().__init__(
            status_code=status_code or self.status_code, detail=self.error_message
        )

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.error_code, message=self.error_message, details=self.details
        )


def status_for(domain_error: DomainError) -> int:
    """
    ドメインエラーに対応するHTTPステータスを返す

    クラス階層をたどり、最初に見つかったステータスを使う（未登録は500）。

    Examples:
        >>> from app.domain.exceptions.base import ValidationError
        >>> status_for(ValidationError())
        400
    """
    for cls in type(domain_error).__mro__:
        if cls in STATUS_MAP:
            return STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def domain_error_to_api_error(domain_error: DomainError) -> APIError:
    """
    ドメインエラーをAPIエラーに変換

    Args:
        domain_error: ドメイン層のエラー

    Returns:
        APIError: ステータス・コード・メッセージを引き継いだAPIエラー
    """
    return APIError(
        message=domain_error.message,
        details=domain_error.details,
        status_code=status_for(domain_error),
        error_code=domain_error.code,
    )
