"""
バックアップログリポジトリ

backup_logsテーブルへのアクセスを提供
- 実行ごとのログ追記（挿入のみ、更新はしない）
- 最新ログの取得
- 保持期限切れログの取得/削除
"""

from datetime import datetime
from typing import Any

from app.core.logging import get_logger

from ..database.backup.models import BackupLogEntry
from ..database.client import DataStore

logger = get_logger(__name__)

BACKUP_LOGS_TABLE = "backup_logs"


class BackupLogRepository:
    """
    バックアップログリポジトリ
    """

    def __init__(self, store: DataStore) -> None:
        """
        Args:
            store: データストアクライアント
        """
        self.store = store

    async def append(self, entry: BackupLogEntry) -> None:
        """
        ログを1行追記する

        Args:
            entry: 追記するログ
        """
        await self.store.insert(BACKUP_LOGS_TABLE, entry.to_insert_row())

    async def latest(self, limit: int = 10) -> list[BackupLogEntry]:
        """
        新しい順にログを取得する

        Args:
            limit: 最大件数

        Returns:
            ログのリスト
        """
        rows = await self.store.select(
            BACKUP_LOGS_TABLE,
            "*",
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        return [BackupLogEntry.model_validate(row) for row in rows]

    async def older_than(self, cutoff: datetime) -> list[dict[str, Any]]:
        """
        created_atがcutoffより厳密に古いログを取得する

        Returns:
            id, file_path を持つ行のリスト
        """
        return await self.store.select(
            BACKUP_LOGS_TABLE,
            "id, file_path",
            lt={"created_at": cutoff.isoformat()},
        )

    async def delete_ids(self, ids: list[Any]) -> None:
        """IDリストで一括削除する"""
        await self.store.delete(BACKUP_LOGS_TABLE, in_filters={"id": ids})
        logger.info(f"Deleted {len(ids)} backup log row(s)")

    async def referenced_paths(self, paths: list[str]) -> set[str]:
        """
        pathsのうち、まだログ行から参照されているものを返す

        同日の再実行では1つのファイルに複数のログ行がある。
        """
        rows = await self.store.select(
            BACKUP_LOGS_TABLE, "file_path", in_filters={"file_path": paths}
        )
        return {row["file_path"] for row in rows}
