"""Presentation layer exceptions"""

from .api_errors import (
    STATUS_MAP,
    APIError,
    ErrorResponse,
    domain_error_to_api_error,
    status_for,
)

__all__ = [
    "ErrorResponse",
    "APIError",
    "STATUS_MAP",
    "domain_error_to_api_error",
    "status_for",
]
