from .backup_log_repository import BackupLogRepository
from .payroll_repository import PayrollRepository
from .settings_repository import AppSettingsRepository

__all__ = ["BackupLogRepository", "AppSettingsRepository", "PayrollRepository"]
