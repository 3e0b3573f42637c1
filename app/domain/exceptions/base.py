"""
ドメイン層の例外クラス

バックアップ・リストア・給与計算で発生するエラーを表現する純粋なPython例外。
フレームワークに依存しない（HTTPステータスへの変換はPresentation層が行う）。
"""

from typing import Any, Optional

Details = Optional[list[dict[str, Any]] | dict[str, Any]]


class DomainError(Exception):
    """
    ドメイン層のベース例外

    Attributes:
        message: エラーメッセージ
        code: エラーコード（識別子）
        details: エラーの詳細情報（オプション）
    """

    def __init__(self, message: str, code: str, details: Details = None) -> None:
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)


class NotFoundError(DomainError):
    """リソース（アーカイブ、スタッフ等）が見つからない"""

    def __init__(
        self, message: str = "Resource not found", details: Details = None
    ) -> None:
        super().__init__(message=message, code="not_found", details=details)


class BadRequestError(DomainError):
    """不正なリクエスト"""

    def __init__(
        self, message: str = "Bad request", details: Details = None
    ) -> None:
        super().__init__(message=message, code="bad_request", details=details)


class UnauthorizedError(DomainError):
    def __init__(
        self, message: str = "Authentication required", details: Details = None
    ) -> None:
        super().__init__(message=message, code="unauthorized", details=details)


class ForbiddenError(DomainError):
    def __init__(
        self, message: str = "Access forbidden", details: Details = None
    ) -> None:
        super().__init__(message=message, code="forbidden", details=details)


class ValidationError(BadRequestError):
    """
    入力値の検証エラー

    アップロードされたバックアップファイルの形式不正や、
    リクエストボディの検証エラーを表す。detailsはフィールドごとのエラーリストも受け付ける。
    """

    def __init__(
        self, message: str = "Validation error", details: Details = None
    ) -> None:
        super().__init__(message=message, details=details)
        self.code = "validation_error"


class BackupUploadError(DomainError):
    """
    アーカイブのアップロード失敗

    失敗ログを記録した後に送出され、その実行全体を失敗扱いにする（保持期限の掃除も行わない）。
    """

    def __init__(
        self, message: str = "Backup upload failed", details: Details = None
    ) -> None:
        super().__init__(message=message, code="backup_upload_failed", details=details)


class RestoreError(DomainError):
    """手動リストアの失敗（退避した行での書き戻し後に送出される）"""

    def __init__(
        self, message: str = "Failed to restore data", details: Details = None
    ) -> None:
        super().__init__(message=message, code="restore_failed", details=details)
