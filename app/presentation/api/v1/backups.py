"""バックアップ管理API"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from app.core.logging import get_logger
from app.domain.exceptions.base import NotFoundError
from app.infrastructure.database.backup.core import BackupContext, run_daily_backup
from app.infrastructure.database.backup.manual import (
    dump_manual_backup,
    export_core_tables,
    manual_backup_file_name,
    parse_manual_backup,
    restore_core_tables,
)
from app.infrastructure.database.backup.models import BackupResult, RestoreResult
from app.infrastructure.database.client import DataStore
from app.infrastructure.repositories.backup_log_repository import BackupLogRepository
from app.infrastructure.repositories.settings_repository import AppSettingsRepository
from app.presentation.api.deps import get_backup_context, get_datastore
from app.presentation.schemas.backup import AutoBackupSettings, BackupLogListResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/logs", response_model=BackupLogListResponse)
async def list_backup_logs(
    limit: int = Query(10, ge=1, le=100),
    store: DataStore = Depends(get_datastore),
) -> BackupLogListResponse:
    """最近のバックアップログ（新しい順）"""
    logs = await BackupLogRepository(store).latest(limit)
    return BackupLogListResponse(logs=logs)


@router.get("/{file_path}/download")
async def download_backup(
    file_path: str,
    context: BackupContext = Depends(get_backup_context),
) -> Response:
    """
    アーカイブをダウンロードする

    存在しない場合は404を返す。
    """
    try:
        data = await context.storage.read(file_path)
    except FileNotFoundError as e:
        raise NotFoundError("Backup file not found", details={"file": file_path}) from e

    return Response(
        content=data,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{file_path}"'},
    )


@router.post("/run", response_model=BackupResult)
async def run_backup_now(
    context: BackupContext = Depends(get_backup_context),
) -> BackupResult:
    """
    バックアップを即時実行する

    auto_backup_enabledの設定に関係なく実行する。
    """
    return await run_daily_backup(context)


@router.get("/settings", response_model=AutoBackupSettings)
async def get_backup_settings(
    store: DataStore = Depends(get_datastore),
) -> AutoBackupSettings:
    enabled = await AppSettingsRepository(store).is_auto_backup_enabled()
    return AutoBackupSettings(auto_backup_enabled=enabled)


@router.put("/settings", response_model=AutoBackupSettings)
async def update_backup_settings(
    body: AutoBackupSettings,
    store: DataStore = Depends(get_datastore),
) -> AutoBackupSettings:
    await AppSettingsRepository(store).set_auto_backup_enabled(body.auto_backup_enabled)
    logger.info(f"Auto backup {'enabled' if body.auto_backup_enabled else 'disabled'}")
    return body


@router.get("/export")
async def export_backup(store: DataStore = Depends(get_datastore)) -> Response:
    """主要4テーブルをバックアップファイルとしてダウンロードする"""
    now = datetime.now(timezone.utc)
    backup = await export_core_tables(store, now)
    file_name = manual_backup_file_name(now)

    return Response(
        content=dump_manual_backup(backup),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.post("/restore", response_model=RestoreResult)
async def restore_backup(
    file: UploadFile = File(...),
    store: DataStore = Depends(get_datastore),
) -> RestoreResult:
    """
    アップロードされたバックアップファイルから主要4テーブルを復元する

    - 不正なファイル: 400
    - 復元失敗（書き戻し済み）: 500
    """
    backup = parse_manual_backup(await file.read())
    return await restore_core_tables(store, backup)
