"""監視ツール（Sentry, New Relic）の初期化"""

import logging
import os
from typing import Optional

import newrelic.agent
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from app.core.config import Settings, get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def init_newrelic(settings: Settings) -> bool:
    """
    New Relicを初期化する（本番環境かつライセンスキー設定時のみ）

    Returns:
        bool: 有効化した場合True
    """
    if not settings.is_production:
        logger.info(f"New Relic is disabled on {settings.ENV_MODE} mode")
        return False
    if not settings.NEW_RELIC_LICENSE_KEY:
        logger.info("New Relic license key is not set")
        return False

    os.environ["NEW_RELIC_LICENSE_KEY"] = settings.NEW_RELIC_LICENSE_KEY
    os.environ["NEW_RELIC_APP_NAME"] = settings.NEW_RELIC_APP_NAME

    newrelic_config = newrelic.agent.global_settings()
    newrelic_config.high_security = settings.NEW_RELIC_HIGH_SECURITY
    newrelic_config.monitor_mode = settings.NEW_RELIC_MONITOR_MODE
    newrelic_config.app_name = (
        f"{settings.NEW_RELIC_APP_NAME}[{settings.normalized_env_mode}]"
    )

    newrelic.agent.initialize(environment=settings.ENV_MODE)
    logger.info(f"New Relic is enabled (name: {newrelic_config.app_name})")
    return True


def init_sentry(settings: Settings) -> bool:
    """
    Sentryを初期化する（DSN設定時のみ）

    ERROR以上のログはイベントとして送信し、INFO以上はブレッドクラムに残す。
    バックアップの失敗テーブル警告などが直前の文脈として付く。

    Returns:
        bool: 有効化した場合True
    """
    if not settings.SENTRY_DSN:
        logger.info(f"Sentry is disabled on {settings.normalized_env_mode} mode")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.normalized_env_mode,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
        ],
    )
    logger.info(f"Sentry is enabled on {settings.normalized_env_mode} mode")
    return True


def init_monitoring(settings: Optional[Settings] = None) -> None:
    """Sentry/New Relicの初期化"""
    settings = settings or get_settings()
    init_newrelic(settings)
    init_sentry(settings)
