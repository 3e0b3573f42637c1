"""スケジューラー管理"""

from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from app.core.logging import get_logger

from .registry import SCHEDULE_TIMEZONE, TaskRegistry, task_registry

logger = get_logger(__name__)


def create_scheduler(registry: Optional[TaskRegistry] = None) -> BackgroundScheduler:
    """
    スケジューラーを作成し、レジストリのタスクをジョブとして追加する。

    同じジョブが重なって実行されないよう max_instances=1、
    停止中に溜まった実行は1回にまとめる（coalesce）。

    Args:
        registry: タスクレジストリ（Noneの場合はグローバルレジストリ）

    Returns:
        BackgroundScheduler: 未起動のスケジューラー
    """
    registry = registry or task_registry
    scheduler = BackgroundScheduler(timezone=SCHEDULE_TIMEZONE)

    for task_id, task_info in registry.get_all().items():
        scheduler.add_job(
            task_info["func"],
            trigger=task_info["trigger"],
            id=task_id,
            name=task_info["description"] or task_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info(f"[SCHEDULER] Registered task: {task_id} ({task_info['cron']})")

    return scheduler


def start_scheduler(scheduler: BackgroundScheduler) -> None:
    scheduler.start()
    logger.info("[SCHEDULER] Started")

    for job in scheduler.get_jobs():
        logger.info(f"[SCHEDULER] {job.id} next run: {job.next_run_time}")


def stop_scheduler(scheduler: BackgroundScheduler) -> None:
    # 実行中のバックアップは完了を待たずに停止する
    if scheduler.running:
        scheduler.shutdown(wait=False)
    logger.info("[SCHEDULER] Stopped")
