from .cors import AdminCORSMiddleware
from .error_handler import error_response_middleware
from .security_headers import SecurityHeadersMiddleware

__all__ = ["AdminCORSMiddleware", "error_response_middleware", "SecurityHeadersMiddleware"]
