"""
監視ツール初期化の単体テスト
"""

from unittest.mock import MagicMock, patch

from app.core.config import Settings
from app.core.monitoring import init_newrelic, init_sentry


def make_settings(**values: object) -> Settings:
    return Settings(_env_file=None, **values)  # type: ignore[arg-type]


class TestInitSentry:
    @patch("app.core.monitoring.sentry_sdk")
    def test_disabled_without_dsn(self, mock_sentry: MagicMock) -> None:
        assert init_sentry(make_settings(SENTRY_DSN="")) is False
        mock_sentry.init.assert_not_called()

    @patch("app.core.monitoring.sentry_sdk")
    def test_enabled_with_dsn(self, mock_sentry: MagicMock) -> None:
        """DSNがあれば環境名を付けて初期化すること"""
        settings = make_settings(
            SENTRY_DSN="https://key@o0.ingest.sentry.io/0", ENV_MODE="development"
        )

        assert init_sentry(settings) is True
        kwargs = mock_sentry.init.call_args.kwargs
        assert kwargs["dsn"] == "https://key@o0.ingest.sentry.io/0"
        assert kwargs["environment"] == "local"


class TestInitNewRelic:
    @patch("app.core.monitoring.newrelic.agent")
    def test_disabled_outside_production(self, mock_agent: MagicMock) -> None:
        settings = make_settings(ENV_MODE="development", NEW_RELIC_LICENSE_KEY="key")

        assert init_newrelic(settings) is False
        mock_agent.initialize.assert_not_called()

    @patch("app.core.monitoring.newrelic.agent")
    def test_disabled_without_license_key(self, mock_agent: MagicMock) -> None:
        assert init_newrelic(make_settings(ENV_MODE="production")) is False
        mock_agent.initialize.assert_not_called()
