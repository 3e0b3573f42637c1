from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request, Response, status

from app.core.config import get_settings
from app.core.logging import get_logger
from app.infrastructure.database.backup.core import BackupContext
from app.infrastructure.repositories.backup_log_repository import BACKUP_LOGS_TABLE
from app.presentation.schemas.system import DataStoreStatus, HealthCheckResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck(request: Request, response: Response) -> HealthCheckResponse:
    """
    ヘルスチェックエンドポイント

    - データストア接続状況
    - スケジューラーの稼働状況
    - アプリケーションuptime
    - 環境情報を返す

    データストアへのクエリに失敗した場合は503 Service Unavailableを返す
    """
    settings = get_settings()

    # uptime計算
    start_time = getattr(request.app.state, "start_time", None)
    uptime_seconds = 0.0
    if start_time:
        uptime_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()

    context: Optional[BackupContext] = getattr(
        request.app.state, "backup_context", None
    )
    overall_status: str = "ok"

    if context is None:
        store_status = DataStoreStatus(
            status="healthy", connection=False, error="Data store disabled"
        )
    else:
        try:
            # 軽量な接続テスト
            await context.store.select(BACKUP_LOGS_TABLE, "id", limit=1)
            store_status = DataStoreStatus(status="healthy", connection=True)
        except Exception as e:
            logger.error(f"Data store health check failed: {e}", exc_info=True)
            store_status = DataStoreStatus(
                status="unhealthy", connection=False, error=str(e)
            )
            overall_status = "unhealthy"

    if overall_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    scheduler = getattr(request.app.state, "scheduler", None)

    return HealthCheckResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=uptime_seconds,
        datastore=store_status,
        scheduler_running=bool(scheduler is not None and scheduler.running),
        environment=settings.normalized_env_mode,
    )
