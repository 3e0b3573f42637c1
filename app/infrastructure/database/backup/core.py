"""日次バックアップのコアロジック"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.logging import get_logger
from app.domain.exceptions.base import BackupUploadError

from ...repositories.backup_log_repository import BackupLogRepository
from ...storage.base import ObjectStore
from ..client import DataStore
from .models import (
    BackupLogEntry,
    BackupPayload,
    BackupResult,
    TableFetchResult,
)

logger = get_logger(__name__)

# バックアップ対象テーブル（固定）
BACKUP_TABLES: tuple[str, ...] = (
    "staff",
    "attendance",
    "advances",
    "payroll",
    "mlt_staff",
    "mlt_attendance",
    "mlt_advances",
    "petroleum_sales",
    "petroleum_payments",
    "reminders",
    "app_settings",
    "credit_parties",
    "credit_party_transactions",
    "tyre_sales",
    "dispatch_reports",
    "bolder_reports",
    "mlt_services",
    "mlt_fuel_reports",
    "salary_records",
    "daily_photos",
)

BACKUP_VERSION = "4.0-auto"
DEFAULT_RETENTION_DAYS = 30


@dataclass
class BackupContext:
    """
    バックアップ実行に必要な依存一式

    プロセス起動時に一度だけ構築し、バックアップ処理へ引数で渡す。
    テストではフェイクのストアを渡せる。

    Attributes:
        store: データストアクライアント
        storage: アーカイブ保存先のオブジェクトストレージ
        tables: バックアップ対象テーブル
        retention_days: アーカイブの保持日数
        version: アーカイブのフォーマットバージョン
    """

    store: DataStore
    storage: ObjectStore
    tables: tuple[str, ...] = BACKUP_TABLES
    retention_days: int = DEFAULT_RETENTION_DAYS
    version: str = BACKUP_VERSION


def backup_file_name(now: datetime) -> str:
    """
    アーカイブのファイル名を生成する（1日1ファイル）

    Args:
        now: 実行日時（タイムゾーン付き。UTCの日付を使う）

    Returns:
        str: backup-YYYY-MM-DD.json

    Raises:
        ValueError: タイムゾーンなしの日時が渡された場合
    """
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be timezone-aware")
    return f"backup-{now.astimezone(timezone.utc).date().isoformat()}.json"


async def fetch_table(store: DataStore, table: str) -> TableFetchResult:
    """
    1テーブルの全行を取得する

    取得に失敗した場合は例外を送出せず、failedの結果を返す。

    Args:
        store: データストアクライアント
        table: テーブル名

    Returns:
        TableFetchResult: 取得結果
    """
    try:
        rows = await store.select(table, "*")
    except Exception as e:
        logger.warning(f"Error fetching {table}: {e}")
        return TableFetchResult.failed(table, str(e))
    return TableFetchResult.ok(table, rows)


async def fetch_tables(
    store: DataStore, tables: tuple[str, ...]
) -> list[TableFetchResult]:
    """
    全テーブルを並行して取得する

    Args:
        store: データストアクライアント
        tables: テーブル名のリスト

    Returns:
        テーブル順の取得結果リスト
    """
    return list(await asyncio.gather(*(fetch_table(store, t) for t in tables)))


async def build_payload(
    context: BackupContext, now: datetime
) -> BackupPayload:
    """
    バックアップペイロードを作成する

    Args:
        context: バックアップコンテキスト
        now: 作成日時

    Returns:
        BackupPayload: 全対象テーブルをキーに持つペイロード
    """
    results = await fetch_tables(context.store, context.tables)

    failed = [r.table for r in results if not r.is_ok]
    if failed:
        logger.warning(f"Tables backed up as empty after fetch errors: {failed}")

    for result in results:
        logger.info(f"- {result.table}: {len(result.rows)} rows")

    return BackupPayload.from_snapshots(
        [r.to_snapshot() for r in results], created_at=now, version=context.version
    )


async def sweep_expired_backups(
    context: BackupContext, logs: BackupLogRepository, now: datetime
) -> int:
    """
    保持期限を過ぎたバックアップを削除する

    ログ行を先に削除し、その後ストレージのオブジェクトを削除する。
    途中で失敗しても、参照先のないログ行は残らない（残るのは未参照のファイルのみ）。
    保持期間内のログ行がまだ参照しているファイル（同日の再実行分）は削除しない。

    Args:
        context: バックアップコンテキスト
        logs: バックアップログリポジトリ
        now: 実行日時

    Returns:
        int: 削除したログ行数
    """
    cutoff = now - timedelta(days=context.retention_days)
    old_logs = await logs.older_than(cutoff)

    if not old_logs:
        return 0

    await logs.delete_ids([row["id"] for row in old_logs])

    expired_paths = sorted({row["file_path"] for row in old_logs})
    still_referenced = await logs.referenced_paths(expired_paths)
    unreferenced = [path for path in expired_paths if path not in still_referenced]
    if unreferenced:
        await context.storage.delete_many(unreferenced)

    logger.info(f"Removed {len(old_logs)} backup(s) older than {cutoff.isoformat()}")
    return len(old_logs)


async def run_daily_backup(
    context: BackupContext, now: Optional[datetime] = None
) -> BackupResult:
    """
    日次バックアップを実行する

    1. 全対象テーブルを並行取得（失敗テーブルは空リスト）
    2. JSONにシリアライズしてストレージへアップロード（同日分は上書き）
    3. 結果をbackup_logsに記録
    4. 保持期限を過ぎたバックアップを削除

    Args:
        context: バックアップコンテキスト
        now: 実行日時（Noneの場合は現在時刻UTC）

    Returns:
        BackupResult: 実行結果

    Raises:
        BackupUploadError: アップロードに失敗した場合（失敗ログを記録後に送出）
    """
    now = now or datetime.now(timezone.utc)
    logs = BackupLogRepository(context.store)

    file_name = backup_file_name(now)

    logger.info("Creating backup archive...")
    payload = await build_payload(context, now)
    body = payload.to_json_bytes()

    try:
        await context.storage.write(file_name, body)
    except Exception as e:
        logger.error(f"Failed to upload {file_name}: {e}")
        await logs.append(
            BackupLogEntry(
                file_path=file_name,
                file_size=0,
                status="failed",
                error_message=str(e),
            )
        )
        raise BackupUploadError(str(e), details={"file": file_name}) from e

    await logs.append(
        BackupLogEntry(file_path=file_name, file_size=len(body), status="success")
    )
    logger.info(f"Uploaded {file_name} ({len(body) / 1024:.2f} KB)")

    await sweep_expired_backups(context, logs, now)

    return BackupResult(success=True, file=file_name, size=len(body))
