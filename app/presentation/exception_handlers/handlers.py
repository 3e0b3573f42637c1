"""FastAPI例外ハンドラー"""

from typing import Awaitable, Callable, Optional, cast

import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.domain.exceptions.base import DomainError, ValidationError
from app.presentation.exceptions.api_errors import (
    APIError,
    ErrorResponse,
    domain_error_to_api_error,
)

logger = get_logger(__name__)


def error_json(
    error: ErrorResponse, status_code: int, headers: Optional[dict[str, str]] = None
) -> Response:
    return JSONResponse(
        content=jsonable_encoder(error), status_code=status_code, headers=headers
    )


async def domain_error_handler(request: Request, exc: DomainError) -> Response:
    """
    DomainError例外ハンドラ

    5xxに変換されるエラー（アップロード失敗・リストア失敗）はログとSentryに送る。
    """
    api_error = domain_error_to_api_error(exc)
    if api_error.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        sentry_sdk.capture_exception(exc)
    return error_json(api_error.to_response(), api_error.status_code)


async def api_error_handler(request: Request, exc: APIError) -> Response:
    return error_json(exc.to_response(), exc.status_code)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """
    HTTPException例外ハンドラ（認証エラー・404等）

    ルーティングの404/405はStarletteのHTTPExceptionで送出されるため、基底クラスで登録する。
    """
    error = ErrorResponse(code="http_error", message=str(exc.detail))
    return error_json(error, exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """リクエストの検証エラー（クエリ・ボディ・アップロード）"""
    error = ValidationError(
        message="Invalid request",
        details=[
            {"loc": err["loc"], "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ],
    )
    api_error = domain_error_to_api_error(error)
    return error_json(api_error.to_response(), api_error.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """
    FastAPIアプリケーションに例外ハンドラーを登録

    Args:
        app: FastAPIアプリケーションインスタンス
    """
    # Starletteのハンドラー型に合わせるためのキャスト
    handler_type = Callable[[Request, Exception], Awaitable[Response]]

    app.add_exception_handler(DomainError, cast(handler_type, domain_error_handler))
    app.add_exception_handler(APIError, cast(handler_type, api_error_handler))
    app.add_exception_handler(
        StarletteHTTPException, cast(handler_type, http_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast(handler_type, validation_exception_handler)
    )
