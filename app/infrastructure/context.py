"""外部サービス（データストア・オブジェクトストレージ）の初期化"""

from app.core.config import Settings
from app.core.logging import get_logger

from .database.backup.core import BackupContext
from .database.supabase import SupabaseDataStore
from .storage.opendal_store import OpendalObjectStore

logger = get_logger(__name__)


def build_backup_context(settings: Settings) -> BackupContext:
    """
    設定からバックアップコンテキストを構築する

    Args:
        settings: アプリケーション設定

    Returns:
        BackupContext: データストアとストレージを持つコンテキスト

    Raises:
        RuntimeError: Supabaseの接続情報が設定されていない場合
    """
    if not settings.has_datastore:
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set"
        )

    store = SupabaseDataStore(
        settings.SUPABASE_URL or "", settings.SUPABASE_SERVICE_ROLE_KEY or ""
    )
    storage = OpendalObjectStore.from_settings(settings)
    logger.info(f"Backup context ready (retention: {settings.BACKUP_RETENTION_DAYS} days)")

    return BackupContext(
        store=store,
        storage=storage,
        retention_days=settings.BACKUP_RETENTION_DAYS,
    )
