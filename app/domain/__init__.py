"""Domain layer - Business rules and entities"""

from .exceptions.base import (
    BackupUploadError,
    BadRequestError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    RestoreError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "NotFoundError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "ValidationError",
    "BackupUploadError",
    "RestoreError",
]
