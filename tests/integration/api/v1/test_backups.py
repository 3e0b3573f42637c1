"""
バックアップ管理API（/api/v1/backups）の統合テスト
"""

import json
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from tests.helpers import FakeDataStore, FakeObjectStore

BASE = "/api/v1/backups"


class TestLogs:
    def test_latest_first(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        """新しい順に返すこと"""
        now = datetime(2025, 6, 15, tzinfo=timezone.utc)
        for days in (3, 1, 2):
            store.rows("backup_logs").append(
                {
                    "id": f"log-{days}",
                    "file_path": f"backup-{(now - timedelta(days=days)).date()}.json",
                    "file_size": 10,
                    "status": "success",
                    "created_at": (now - timedelta(days=days)).isoformat(),
                }
            )

        response = client.get(f"{BASE}/logs", params={"limit": 2}, headers=auth_headers)

        assert response.status_code == 200
        logs = response.json()["logs"]
        assert [log["id"] for log in logs] == ["log-1", "log-2"]


class TestRunAndDownload:
    def test_run_then_download(
        self, client: TestClient, storage: FakeObjectStore, auth_headers: dict[str, str]
    ) -> None:
        """即時実行したアーカイブをダウンロードできること"""
        run = client.post(f"{BASE}/run", headers=auth_headers)
        assert run.status_code == 200
        file_name = run.json()["file"]

        response = client.get(f"{BASE}/{file_name}/download", headers=auth_headers)

        assert response.status_code == 200
        assert response.content == storage.objects[file_name]
        assert file_name in response.headers["content-disposition"]

    def test_run_ignores_auto_backup_setting(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        store.rows("app_settings").append(
            {"id": "1", "setting_key": "auto_backup_enabled", "setting_value": "false"}
        )

        response = client.post(f"{BASE}/run", headers=auth_headers)

        assert response.status_code == 200

    def test_run_upload_failure_is_502(
        self, client: TestClient, storage: FakeObjectStore, auth_headers: dict[str, str]
    ) -> None:
        storage.fail_writes = True

        response = client.post(f"{BASE}/run", headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["code"] == "backup_upload_failed"

    def test_download_missing_file(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.get(f"{BASE}/backup-1999-01-01.json/download", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestSettings:
    def test_default_enabled(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """未設定の場合は有効扱い"""
        response = client.get(f"{BASE}/settings", headers=auth_headers)

        assert response.json() == {"auto_backup_enabled": True}

    def test_update(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        """無効化すると"false"として保存されること"""
        response = client.put(
            f"{BASE}/settings", json={"auto_backup_enabled": False}, headers=auth_headers
        )

        assert response.status_code == 200
        assert store.rows("app_settings")[0]["setting_value"] == "false"
        assert client.get(f"{BASE}/settings", headers=auth_headers).json() == {
            "auto_backup_enabled": False
        }


class TestExportRestore:
    def test_export_download(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        store.rows("staff").append({"id": "s1", "name": "Ravi"})

        response = client.get(f"{BASE}/export", headers=auth_headers)

        assert response.status_code == 200
        assert "tnt-backup-" in response.headers["content-disposition"]
        document = json.loads(response.content)
        assert document["version"] == "2.0"
        assert document["data"]["staff"] == [{"id": "s1", "name": "Ravi"}]

    def test_restore_upload(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        store.rows("staff").append({"id": "old"})
        body = json.dumps(
            {"version": "2.0", "data": {"staff": [{"id": "s1"}, {"id": "s2"}]}}
        )

        response = client.post(
            f"{BASE}/restore",
            files={"file": ("backup.json", body, "application/json")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["restored_rows"]["staff"] == 2
        assert [r["id"] for r in store.rows("staff")] == ["s1", "s2"]

    def test_restore_invalid_file(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        """不正なファイルは400で、データは変更しないこと"""
        store.rows("staff").append({"id": "old"})

        response = client.post(
            f"{BASE}/restore",
            files={"file": ("backup.json", b"{}", "application/json")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid backup file"
        assert store.rows("staff") == [{"id": "old"}]

    def test_restore_failure_is_500(
        self, client: TestClient, store: FakeDataStore, auth_headers: dict[str, str]
    ) -> None:
        store.rows("staff").append({"id": "old"})
        store.fail("insert", "staff", times=1)
        body = json.dumps({"version": "2.0", "data": {"staff": [{"id": "s1"}]}})

        response = client.post(
            f"{BASE}/restore",
            files={"file": ("backup.json", body, "application/json")},
            headers=auth_headers,
        )

        assert response.status_code == 500
        assert response.json()["code"] == "restore_failed"
        assert [r["id"] for r in store.rows("staff")] == ["old"]
