"""データベースバックアップ・リストア機能"""

from .models import (
    BackupLogEntry,
    BackupPayload,
    BackupResult,
    ManualBackup,
    RestoreResult,
    TableFetchResult,
    TableSnapshot,
)

__all__ = [
    "BackupLogEntry",
    "BackupPayload",
    "BackupResult",
    "ManualBackup",
    "RestoreResult",
    "TableFetchResult",
    "TableSnapshot",
]
