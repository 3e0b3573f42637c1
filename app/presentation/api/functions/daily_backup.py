"""
日次バックアップのHTTPトリガー

外部のスケジューラーから呼び出される。OPTIONS（プリフライト）は認証なしで
空の200を返し、それ以外のメソッドはAPIキー認証の上でバックアップを実行する。
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.infrastructure.database.backup.core import BackupContext, run_daily_backup
from app.infrastructure.database.backup.models import BackupResult
from app.presentation.api.deps import get_api_key
from app.presentation.schemas.backup import BackupFailureResponse

router = APIRouter()
logger = get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@router.options("")
async def daily_backup_preflight() -> Response:
    """CORSプリフライト"""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(
    "",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=BackupResult,
    responses={500: {"model": BackupFailureResponse}},
)
async def daily_backup(
    request: Request,
    _: str = Depends(get_api_key),
) -> Response:
    """
    日次バックアップを実行する

    - 成功: 200 {success: true, file, size}
    - 失敗: 500 {success: false, error}
    """
    context: Optional[BackupContext] = getattr(
        request.app.state, "backup_context", None
    )

    try:
        if context is None:
            raise RuntimeError("Data store is not configured")

        logger.info("Starting daily backup...")
        result = await run_daily_backup(context)
    except Exception as e:
        logger.error(f"Backup failed: {e}", exc_info=True)
        failure = BackupFailureResponse(error=str(e))
        return JSONResponse(
            content=failure.model_dump(), status_code=500, headers=CORS_HEADERS
        )

    return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)
