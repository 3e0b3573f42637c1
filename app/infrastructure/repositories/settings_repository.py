"""アプリ設定（app_settingsテーブル）リポジトリ"""

from datetime import datetime, timezone
from typing import Optional

from ..database.client import DataStore

APP_SETTINGS_TABLE = "app_settings"
AUTO_BACKUP_KEY = "auto_backup_enabled"


class AppSettingsRepository:
    """
    キー/値形式のアプリ設定

    値は文字列で保存される（真偽値は "true" / "false"）。
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store

    async def get(self, key: str) -> Optional[str]:
        rows = await self.store.select(
            APP_SETTINGS_TABLE, "setting_value", filters={"setting_key": key}, limit=1
        )
        if not rows:
            return None
        return rows[0].get("setting_value")

    async def set(self, key: str, value: str) -> None:
        """既存キーは更新、なければ挿入する"""
        existing = await self.store.select(
            APP_SETTINGS_TABLE, "id", filters={"setting_key": key}, limit=1
        )
        if existing:
            await self.store.update(
                APP_SETTINGS_TABLE,
                {
                    "setting_value": value,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                {"setting_key": key},
            )
        else:
            await self.store.insert(
                APP_SETTINGS_TABLE, {"setting_key": key, "setting_value": value}
            )

    async def is_auto_backup_enabled(self) -> bool:
        # 未設定の場合は有効扱い
        value = await self.get(AUTO_BACKUP_KEY)
        return value != "false"

    async def set_auto_backup_enabled(self, enabled: bool) -> None:
        await self.set(AUTO_BACKUP_KEY, "true" if enabled else "false")
