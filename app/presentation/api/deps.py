from typing import Optional

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from starlette.status import HTTP_403_FORBIDDEN, HTTP_503_SERVICE_UNAVAILABLE

from ...core.config import get_settings
from ...infrastructure.database.backup.core import BackupContext
from ...infrastructure.database.client import DataStore

# API認証用のヘッダーハンドラーを作成
api_key_header = APIKeyHeader(
    name="Authorization", scheme_name="Bearer", auto_error=False
)


def get_api_key(
    api_key_header: Optional[str] = Security(api_key_header),
) -> str:
    """
    APIキー認証のdependency
    Authorizationヘッダーに'Bearer {api_key}'形式で指定されたAPIキーを検証

    - Authorization: Bearer your-api-key-here
    """
    settings = get_settings()

    if not api_key_header:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Authorization header missing"
        )

    # Bearerプレフィックスの処理
    scheme, _, api_key = api_key_header.partition(" ")
    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="Authorization header must start with 'Bearer'",
        )

    if not api_key or api_key != settings.API_KEY:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Invalid API key")

    return api_key


def get_backup_context(request: Request) -> BackupContext:
    """
    起動時に構築したバックアップコンテキストを取得するdependency

    Supabaseが未設定で起動した場合は503を返す。
    """
    context: Optional[BackupContext] = getattr(
        request.app.state, "backup_context", None
    )
    if context is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Data store is not configured",
        )
    return context


def get_datastore(context: BackupContext = Depends(get_backup_context)) -> DataStore:
    """データストアクライアントを取得するdependency"""
    return context.store
