"""バックアップ関連のスキーマ定義"""

from typing import Literal

from pydantic import BaseModel, Field

from app.infrastructure.database.backup.models import BackupLogEntry


class BackupFailureResponse(BaseModel):
    """
    日次バックアップ失敗時のレスポンス

    Attributes:
        success: 常にFalse
        error: エラーメッセージ
    """

    success: Literal[False] = False
    error: str


class BackupLogListResponse(BaseModel):
    """バックアップログ一覧"""

    logs: list[BackupLogEntry]


class AutoBackupSettings(BaseModel):
    """自動バックアップ設定"""

    auto_backup_enabled: bool = Field(description="スケジュール実行の有効/無効")
