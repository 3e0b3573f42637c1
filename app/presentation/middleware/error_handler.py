"""エラーハンドリングミドルウェア"""

from collections.abc import Awaitable, Callable

import sentry_sdk
from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.presentation.exceptions.api_errors import ErrorResponse

logger = get_logger(__name__)


async def error_response_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    例外ハンドラーで処理されなかった例外を500のJSONレスポンスにする

    例外はSentryに送信し、リクエストのメソッドとパスを付けてログに残す。
    """
    try:
        return await call_next(request)
    except Exception as e:
        with sentry_sdk.new_scope() as scope:
            scope.set_tag("http.route", request.url.path)
            sentry_sdk.capture_exception(e)
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {e}",
            exc_info=e,
        )

        error = ErrorResponse(
            code="internal_server_error",
            message="Internal server error occurred",
        )
        return JSONResponse(content=jsonable_encoder(error), status_code=500)
