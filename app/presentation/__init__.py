"""
Presentation layer - HTTP API

ルーターはapp.presentation.apiから直接インポートする
（ここでインポートするとapp.coreとの循環インポートになる）。
"""

from .exceptions import APIError, ErrorResponse, domain_error_to_api_error, status_for

__all__ = [
    "APIError",
    "ErrorResponse",
    "domain_error_to_api_error",
    "status_for",
]
