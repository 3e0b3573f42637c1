"""FastAPIアプリケーションファクトリー"""

import logging
from typing import Any, Optional

from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.core.lifespan import lifespan
from app.presentation.api import FUNCTIONS_PREFIX, api_router, functions_router
from app.presentation.exception_handlers import register_exception_handlers
from app.presentation.middleware.cors import AdminCORSMiddleware
from app.presentation.middleware.error_handler import error_response_middleware
from app.presentation.middleware.security_headers import SecurityHeadersMiddleware

HEALTHCHECK_PATH = "/api/system/healthcheck"


class HealthCheckFilter(logging.Filter):
    """uvicornのアクセスログからヘルスチェックを除外する"""

    def filter(self, record: logging.LogRecord) -> bool:
        return HEALTHCHECK_PATH not in record.getMessage()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPIアプリケーションを生成

    ルーティング:
    - /api/system/healthcheck/ : 認証なし
    - /api/v1/... : APIキー認証（バックアップ管理・給与）
    - /functions/v1/daily-backup : 日次バックアップのHTTPトリガー

    Args:
        settings: アプリケーション設定（Noneの場合はget_settings()）

    Returns:
        FastAPIアプリケーションインスタンス
    """
    settings = settings or get_settings()

    app_params: dict[str, Any] = {
        "title": "TNT Payroll Backend",
        "description": "スタッフ・給与データのバックアップと給与計算API",
        "version": "0.1.0",
        "lifespan": lifespan,
    }
    # 本番環境ではドキュメントを公開しない
    if settings.is_production:
        app_params.update(docs_url=None, redoc_url=None, openapi_url=None)

    app = FastAPI(**app_params)

    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())

    # 管理画面のオリジン（トリガーは自前でCORSヘッダーを返すため対象外）
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            AdminCORSMiddleware,
            exclude_paths=[FUNCTIONS_PREFIX],
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    register_exception_handlers(app)
    app.middleware("http")(error_response_middleware)

    app.include_router(api_router, prefix="/api")
    app.include_router(functions_router)

    return app
