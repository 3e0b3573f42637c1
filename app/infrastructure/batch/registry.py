"""定期実行タスクのレジストリ"""

from collections.abc import Callable
from typing import Optional, TypedDict

from apscheduler.triggers.cron import CronTrigger

# cron式はUTCで解釈する（バックアップファイル名の日付もUTC）
SCHEDULE_TIMEZONE = "UTC"


class TaskInfo(TypedDict):
    func: Callable[[], None]
    trigger: CronTrigger
    cron: str
    description: str


class TaskRegistry:
    """
    定期実行タスクのレジストリ。

    タスクモジュールがインポート時に自身を登録し、
    スケジューラーは起動時にここから一覧を読む。

    Example:
        >>> task_registry.register(
        ...     task_id="daily_backup",
        ...     func=run_backup,
        ...     cron="0 3 * * *",
        ...     description="Daily table backup",
        ... )
    """

    def __init__(self) -> None:
        self.tasks: dict[str, TaskInfo] = {}

    def register(
        self, task_id: str, func: Callable[[], None], cron: str, description: str = ""
    ) -> None:
        """
        タスクを登録する。同じIDで登録し直した場合は上書きする。

        Args:
            task_id: タスクID
            func: 実行する関数（引数なし）
            cron: crontab形式のスケジュール（UTC）
            description: ログ・ジョブ名に使う説明

        Raises:
            ValueError: cron式が不正な場合
        """
        self.tasks[task_id] = {
            "func": func,
            "trigger": CronTrigger.from_crontab(cron, timezone=SCHEDULE_TIMEZONE),
            "cron": cron,
            "description": description,
        }

    def unregister(self, task_id: str) -> None:
        self.tasks.pop(task_id, None)

    def get(self, task_id: str) -> Optional[TaskInfo]:
        return self.tasks.get(task_id)

    def get_all(self) -> dict[str, TaskInfo]:
        return self.tasks


# グローバルレジストリインスタンス
task_registry = TaskRegistry()
