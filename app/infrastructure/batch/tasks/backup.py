"""日次バックアップタスク"""

import asyncio
from typing import Optional

from app.core.config import Settings, get_settings
from app.infrastructure.batch.base import BatchTask
from app.infrastructure.batch.registry import task_registry
from app.infrastructure.context import build_backup_context
from app.infrastructure.database.backup.core import BackupContext, run_daily_backup
from app.infrastructure.database.backup.models import BackupResult
from app.infrastructure.repositories.settings_repository import AppSettingsRepository


class DailyBackupTask(BatchTask):
    """
    日次バックアップタスク。

    全対象テーブルをJSONアーカイブとしてストレージに保存し、
    保持期限を過ぎたアーカイブを削除する。

    スケジュール実行時はapp_settingsのauto_backup_enabledが"false"ならスキップする。
    CLIなどの手動実行ではrespect_toggle=Falseで設定を無視できる。
    """

    name = "daily_backup"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        context: Optional[BackupContext] = None,
        respect_toggle: bool = True,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定（Noneの場合はget_settings()）
            context: バックアップコンテキスト（Noneの場合は実行ごとに構築）
            respect_toggle: auto_backup_enabled設定に従うか
        """
        super().__init__()
        self.settings = settings or get_settings()
        self.context = context
        self.respect_toggle = respect_toggle
        self.result: Optional[BackupResult] = None
        self.skipped = False

    def execute(self) -> None:
        """
        バックアップを実行する。

        スケジューラーのスレッドから呼ばれるため、asyncio.runで新しいイベントループを使う。
        """
        self.result = asyncio.run(self._execute())

    async def _execute(self) -> Optional[BackupResult]:
        # コンテキストを渡されていない場合はこのループ専用に構築して最後に閉じる
        owns_context = self.context is None
        context = self.context or build_backup_context(self.settings)

        try:
            if self.respect_toggle:
                enabled = await AppSettingsRepository(context.store).is_auto_backup_enabled()
                if not enabled:
                    self.skipped = True
                    self.logger.info("[BATCH] Auto backup is disabled, skipping")
                    return None

            return await run_daily_backup(context)
        finally:
            if owns_context:
                await context.store.close()

    def on_success(self) -> None:
        if self.result is not None:
            self.logger.info(
                f"[BATCH] Backup saved: {self.result.file} ({self.result.size} bytes)"
            )


def run_backup() -> None:
    """
    スケジュールされたバックアップを実行する。

    スケジューラーから呼び出される。
    """
    DailyBackupTask().run()


# タスクをレジストリに登録
backup_schedule = get_settings().BACKUP_SCHEDULE
if backup_schedule:
    task_registry.register(
        task_id="daily_backup",
        func=run_backup,
        cron=backup_schedule,
        description="Daily table backup to object storage",
    )
