"""
BackupLogRepositoryの単体テスト
"""

import asyncio
from datetime import datetime, timezone

from app.infrastructure.database.backup.models import BackupLogEntry
from app.infrastructure.repositories.backup_log_repository import BackupLogRepository
from tests.helpers import FakeDataStore

CUTOFF = datetime(2025, 5, 16, 3, 0, tzinfo=timezone.utc)


def make_store() -> FakeDataStore:
    return FakeDataStore(
        {
            "backup_logs": [
                {"id": "a", "file_path": "backup-2025-05-10.json", "file_size": 1, "status": "success", "created_at": "2025-05-10T03:00:00+00:00"},
                {"id": "b", "file_path": "backup-2025-05-16.json", "file_size": 1, "status": "success", "created_at": "2025-05-16T03:00:00+00:00"},
                {"id": "c", "file_path": "backup-2025-06-01.json", "file_size": 0, "status": "failed", "error_message": "x", "created_at": "2025-06-01T03:00:00+00:00"},
            ]
        }
    )


class TestBackupLogRepository:
    def test_append(self) -> None:
        store = FakeDataStore()

        asyncio.run(
            BackupLogRepository(store).append(
                BackupLogEntry(file_path="backup-2025-06-15.json", file_size=5, status="success")
            )
        )

        assert store.rows("backup_logs")[0]["file_path"] == "backup-2025-06-15.json"

    def test_latest(self) -> None:
        logs = asyncio.run(BackupLogRepository(make_store()).latest(2))

        assert [log.id for log in logs] == ["c", "b"]
        assert logs[0].status == "failed"
        assert logs[0].error_message == "x"

    def test_older_than_is_strict(self) -> None:
        """cutoffと同時刻のログは含まないこと"""
        rows = asyncio.run(BackupLogRepository(make_store()).older_than(CUTOFF))

        assert rows == [{"id": "a", "file_path": "backup-2025-05-10.json"}]

    def test_delete_ids(self) -> None:
        store = make_store()

        asyncio.run(BackupLogRepository(store).delete_ids(["a", "c"]))

        assert [row["id"] for row in store.rows("backup_logs")] == ["b"]


class TestReferencedPaths:
    def test_returns_only_referenced(self) -> None:
        """ログ行から参照されているパスのみを返すこと"""
        store = FakeDataStore(
            {"backup_logs": [{"id": "1", "file_path": "backup-2025-05-16.json"}]}
        )

        paths = asyncio.run(
            BackupLogRepository(store).referenced_paths(
                ["backup-2025-05-16.json", "backup-2025-05-15.json"]
            )
        )

        assert paths == {"backup-2025-05-16.json"}
