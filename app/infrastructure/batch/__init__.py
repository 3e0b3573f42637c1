"""
バッチ処理（APScheduler）

タスクはtasksパッケージのインポート時にtask_registryへ登録され、
lifespanでBackgroundSchedulerに載せて実行する。
"""

from .base import BatchTask
from .registry import TaskInfo, TaskRegistry, task_registry
from .scheduler import create_scheduler, start_scheduler, stop_scheduler

__all__ = [
    "BatchTask",
    "TaskInfo",
    "TaskRegistry",
    "task_registry",
    "create_scheduler",
    "start_scheduler",
    "stop_scheduler",
]
