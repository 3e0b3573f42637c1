from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """
    アプリケーション設定
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # 未定義のフィールドを無視
    )

    ENV_MODE: Literal["development", "production", "test"] = "development"

    BACKEND_CORS_ORIGINS: str | list[str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str] | str:
        if v == "":
            return []
        if v == "*":
            return ["*"]
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        if isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    SECURITY_HEADERS: bool = False
    CSP_POLICY: str = (
        "default-src 'self'; img-src 'self' data:; script-src 'self'; style-src 'self'"
    )

    API_KEY: str = "default_api_key_change_me_in_production"

    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    @property
    def has_datastore(self) -> bool:
        """データストア設定有無"""
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 1.0

    @field_validator("SENTRY_DSN")
    @classmethod
    def sentry_dsn_can_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return v

    NEW_RELIC_LICENSE_KEY: Optional[str] = None
    NEW_RELIC_APP_NAME: str = "TNT Payroll Backend"
    NEW_RELIC_HIGH_SECURITY: bool = False
    NEW_RELIC_MONITOR_MODE: bool = True

    BACKUP_SCHEDULE: Optional[str] = None  # cron形式 (例: "0 3 * * *")
    BACKUP_RETENTION_DAYS: int = 30
    BACKUP_BUCKET: str = "daily_backups"

    STORAGE_SCHEME: str = "s3"
    S3_ENDPOINT: Optional[str] = None
    S3_ACCESS_KEY: Optional[str] = None
    S3_SECRET_KEY: Optional[str] = None
    S3_REGION: Optional[str] = None

    @property
    def storage_options(self) -> dict[str, str]:
        """
        opendal.AsyncOperatorに渡すオプション

        s3以外のスキーム（memory, fs等）ではバケット名のみをrootとして使う
        """
        if self.STORAGE_SCHEME != "s3":
            return {"root": f"/{self.BACKUP_BUCKET}"}

        options = {
            "bucket": self.BACKUP_BUCKET,
            "region": self.S3_REGION or "auto",
        }
        if self.S3_ENDPOINT:
            options["endpoint"] = self.S3_ENDPOINT
        if self.S3_ACCESS_KEY:
            options["access_key_id"] = self.S3_ACCESS_KEY
        if self.S3_SECRET_KEY:
            options["secret_access_key"] = self.S3_SECRET_KEY
        return options

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.ENV_MODE == "development"

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.ENV_MODE == "production"

    @property
    def is_test(self) -> bool:
        """テスト環境かどうか"""
        return self.ENV_MODE == "test"

    @property
    def normalized_env_mode(self) -> str:
        """監視ツール向けの環境名（development は local として扱う）"""
        if self.is_development:
            return "local"
        return self.ENV_MODE


@lru_cache
def get_settings() -> Settings:
    """
    アプリケーション設定を取得（キャッシュ）
    """
    return Settings()
