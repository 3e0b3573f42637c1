"""
主要4テーブルの手動バックアップ/リストア

管理画面からダウンロード/アップロードされるバックアップファイルを扱う。
自動バックアップ（core.py）とは別フォーマット（version "2.0"）。
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.logging import get_logger
from app.domain.exceptions.base import RestoreError, ValidationError

from ..client import DataStore
from .core import fetch_tables
from .models import ManualBackup, RestoreResult, Row

logger = get_logger(__name__)

MANUAL_BACKUP_VERSION = "2.0"

# 挿入順（親テーブルが先）。削除はこの逆順
CORE_TABLES: tuple[str, ...] = ("staff", "attendance", "advances", "payroll")


def manual_backup_file_name(now: datetime) -> str:
    """tnt-backup-YYYY-MM-DD-HHMM.json"""
    return f"tnt-backup-{now.strftime('%Y-%m-%d-%H%M')}.json"


async def export_core_tables(
    store: DataStore, now: Optional[datetime] = None
) -> ManualBackup:
    """
    主要4テーブルを取得してバックアップを作成する

    Args:
        store: データストアクライアント
        now: 作成日時（Noneの場合は現在時刻UTC）

    Returns:
        ManualBackup: バックアップデータ
    """
    now = now or datetime.now(timezone.utc)
    results = await fetch_tables(store, CORE_TABLES)
    return ManualBackup(
        version=MANUAL_BACKUP_VERSION,
        created_at=now,
        data={r.table: r.rows for r in results},
    )


def dump_manual_backup(backup: ManualBackup) -> bytes:
    """ダウンロード用に整形済みJSONへ変換する"""
    return backup.model_dump_json(indent=2).encode("utf-8")


def parse_manual_backup(raw: bytes | str) -> ManualBackup:
    """
    アップロードされたバックアップファイルを読み込む

    versionとdataオブジェクトの存在のみを検証する。

    Args:
        raw: ファイルの内容

    Returns:
        ManualBackup: バックアップデータ

    Raises:
        ValidationError: JSONとして不正、またはversion/dataがない場合
    """
    try:
        document: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Invalid backup file", details={"reason": str(e)}) from e

    if (
        not isinstance(document, dict)
        or not document.get("version")
        or not isinstance(document.get("data"), dict)
    ):
        raise ValidationError("Invalid backup file")

    try:
        return ManualBackup.model_validate(
            {
                "version": str(document["version"]),
                "data": {
                    table: rows
                    for table, rows in document["data"].items()
                    if isinstance(rows, list)
                },
            }
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid backup file",
            details=[{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()],
        ) from e


async def _replace_core_tables(
    store: DataStore, data: dict[str, list[Row]]
) -> dict[str, int]:
    """4テーブルを全削除し、dataの行を挿入する"""
    for table in reversed(CORE_TABLES):
        await store.delete_all(table)

    restored: dict[str, int] = {}
    for table in CORE_TABLES:
        rows = data.get(table) or []
        if rows:
            await store.insert(table, rows)
        restored[table] = len(rows)
    return restored


async def restore_core_tables(store: DataStore, backup: ManualBackup) -> RestoreResult:
    """
    バックアップから主要4テーブルを復元する

    削除前に現在の行を退避し、削除/挿入のいずれかが失敗した場合は
    退避した行で書き戻してからRestoreErrorを送出する。

    Args:
        store: データストアクライアント
        backup: バックアップデータ

    Returns:
        RestoreResult: リストア結果

    Raises:
        RestoreError: リストアに失敗した場合
    """
    previous = await fetch_tables(store, CORE_TABLES)
    failed_reads = [r.table for r in previous if not r.is_ok]
    if failed_reads:
        # 退避できないまま削除すると書き戻しできないため中止する
        raise RestoreError(
            "Failed to restore data", details={"unreadable_tables": failed_reads}
        )

    try:
        restored = await _replace_core_tables(store, backup.data)
    except Exception as e:
        logger.error(f"Restore failed, rolling back core tables: {e}", exc_info=True)
        try:
            await _replace_core_tables(store, {r.table: r.rows for r in previous})
        except Exception as rollback_error:
            logger.error(f"Rollback after failed restore also failed: {rollback_error}")
        raise RestoreError("Failed to restore data") from e

    total = sum(restored.values())
    logger.info(f"Restored {total} rows into {len(CORE_TABLES)} tables")
    return RestoreResult(
        success=True,
        message=f"Restored {total} rows",
        restored_rows=restored,
    )
