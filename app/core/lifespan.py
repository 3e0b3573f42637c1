"""アプリケーションライフサイクル管理"""

import contextlib
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    アプリケーションのライフサイクル管理

    起動時:
    - 起動時刻の記録
    - バックアップコンテキスト（データストア・ストレージ）の構築
    - バッチタスク登録
    - スケジューラー起動

    シャットダウン時:
    - スケジューラー停止
    - データストアクライアントのクローズ

    Args:
        app: FastAPIアプリケーションインスタンス

    Yields:
        None
    """
    settings = get_settings()

    # 起動時刻を記録（healthcheckのuptime計算用）
    app.state.start_time = datetime.now(timezone.utc)

    # バックアップコンテキスト（テストなどで事前に設定されている場合はそれを使う）
    owns_context = False
    if getattr(app.state, "backup_context", None) is None:
        if settings.has_datastore:
            from app.infrastructure.context import build_backup_context

            app.state.backup_context = build_backup_context(settings)
            owns_context = True
        else:
            app.state.backup_context = None
            logger.info("Data store is disabled (SUPABASE_URL not set)")

    # バッチタスク登録
    from app.infrastructure.batch import tasks  # タスク自動登録  # noqa: F401

    # スケジューラー起動
    from app.infrastructure.batch.scheduler import (
        create_scheduler,
        start_scheduler,
        stop_scheduler,
    )

    scheduler = create_scheduler()
    app.state.scheduler = scheduler
    start_scheduler(scheduler)

    yield

    # シャットダウン
    stop_scheduler(scheduler)
    if owns_context:
        await app.state.backup_context.store.close()
