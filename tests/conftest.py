"""
pytest設定と共通フィクスチャ

データストア・ストレージはインメモリのフェイクに差し替える。
"""

import os
from typing import Any, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


def pytest_configure(config: Any) -> None:
    """
    pytest実行前の設定

    Settingsはモジュールインポート時に読み込まれるため、
    フィクスチャではなくpytest_configureフックで環境変数を設定する
    """
    os.environ["ENV_MODE"] = "test"
    os.environ["API_KEY"] = "test-api-key"
    os.environ["SUPABASE_URL"] = ""
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
    os.environ.pop("BACKUP_SCHEDULE", None)


# pytest_configure後にインポート（環境変数設定後にモジュールをロード）
from app.core.app_factory import create_app  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.infrastructure.database.backup.core import BackupContext  # noqa: E402
from tests.helpers import FakeDataStore, FakeObjectStore  # noqa: E402

API_KEY = "test-api-key"
AUTH_HEADERS = {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """テストごとに設定キャッシュをクリアする"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def journal() -> list[tuple[str, Any]]:
    """データストアとストレージの操作順の記録"""
    return []


@pytest.fixture
def store(journal: list[tuple[str, Any]]) -> FakeDataStore:
    return FakeDataStore(journal=journal)


@pytest.fixture
def storage(journal: list[tuple[str, Any]]) -> FakeObjectStore:
    return FakeObjectStore(journal=journal)


@pytest.fixture
def backup_context(store: FakeDataStore, storage: FakeObjectStore) -> BackupContext:
    return BackupContext(store=store, storage=storage)


@pytest.fixture
def app(backup_context: BackupContext) -> FastAPI:
    """フェイクのコンテキストを設定したアプリケーション"""
    application = create_app()
    application.state.backup_context = backup_context
    return application


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    テスト用HTTPクライアント

    lifespanを実行する（スケジューラーの起動・停止を含む）
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return dict(AUTH_HEADERS)
