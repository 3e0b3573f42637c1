"""バッチタスクの基底クラス"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import ClassVar, Optional

import sentry_sdk

from app.core.logging import get_logger


class BatchTask(ABC):
    """
    バッチタスクの基底クラス。

    サブクラスはexecute()を実装する。run()が開始/終了ログ、
    所要時間の計測、Sentryへの送信、フック呼び出しを行う。

    Example:
        >>> class CleanupTask(BatchTask):
        ...     name = "cleanup"
        ...     def execute(self) -> None:
        ...         ...
        >>> CleanupTask().run()
    """

    # ログに出すタスク名（未指定の場合はクラス名）
    name: ClassVar[Optional[str]] = None

    def __init__(self) -> None:
        self.logger = get_logger(self.__class__.__module__)
        self.last_error: Optional[Exception] = None

    @property
    def task_name(self) -> str:
        return self.name or self.__class__.__name__

    @abstractmethod
    def execute(self) -> None:
        """タスク本体。例外はrun()がSentryへ送信した上で再送出する。"""

    def on_success(self) -> None:
        """成功時のフック"""

    def on_failure(self, error: Exception) -> None:
        """
        失敗時のフック。

        Args:
            error: execute()で発生した例外
        """
        self.logger.error(f"[BATCH] {self.task_name} failed: {error}", exc_info=True)

    def run(self) -> None:
        """
        タスクを実行する。

        Raises:
            Exception: execute()で発生した例外を再送出
        """
        started_at = datetime.now(timezone.utc)
        self.last_error = None
        self.logger.info(f"[BATCH] {self.task_name} start")

        try:
            self.execute()
        except Exception as e:
            self.last_error = e
            self.on_failure(e)
            sentry_sdk.capture_exception(e)
            raise

        self.on_success()
        elapsed = datetime.now(timezone.utc) - started_at
        self.logger.info(f"[BATCH] {self.task_name} completed ({elapsed})")
