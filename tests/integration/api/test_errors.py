"""
APIエラーハンドリングの統合テスト
"""

from typing import Any

from fastapi.testclient import TestClient

from tests.helpers import FakeDataStore


class TestErrorHandling:
    """エラーハンドリングのテスト"""

    def test_404_not_found(self, client: TestClient) -> None:
        """存在しないエンドポイントで404が返ること"""
        response = client.get("/nonexistent")
        assert response.status_code == 404

        data: Any = response.json()
        assert data["status"] == "error"
        assert "message" in data

    def test_405_method_not_allowed(self, client: TestClient) -> None:
        """許可されていないHTTPメソッドで405が返ること"""
        response = client.post("/api/system/healthcheck/")
        assert response.status_code == 405
        assert response.json()["status"] == "error"
        assert response.json()["code"] == "http_error"
        assert "GET" in response.headers["allow"]

    def test_missing_api_key(self, client: TestClient) -> None:
        """APIキーなしの管理APIは403を返すこと"""
        response = client.get("/api/v1/backups/logs")

        assert response.status_code == 403
        assert response.json()["message"] == "Authorization header missing"

    def test_wrong_api_key(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/backups/logs", headers={"Authorization": "Bearer wrong"}
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid API key"

    def test_query_validation_error(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        """クエリパラメータの検証エラーは400のvalidation_errorになること"""
        response = client.get(
            "/api/v1/payroll/salary",
            params={"year": 2025, "month": 13},
            headers=auth_headers,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "validation_error"
        assert data["details"][0]["loc"] == ["query", "month"]

    def test_unhandled_exception_returns_json_500(
        self, store: FakeDataStore, auth_headers: dict[str, str], app: Any
    ) -> None:
        """未処理の例外はJSONの500になること"""
        store.fail("select", "backup_logs", RuntimeError("connection reset"))

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/v1/backups/logs", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "internal_server_error"
