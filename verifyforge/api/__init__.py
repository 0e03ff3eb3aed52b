"""HTTP surface of the VerifyForge service."""

from verifyforge.api.app import create_app, error_middleware
from verifyforge.api.validation import RequestValidationError, parse_submission

__all__ = [
    "RequestValidationError",
    "create_app",
    "error_middleware",
    "parse_submission",
]
