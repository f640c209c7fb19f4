"""Utils package for the Waggle match service."""

from waggle.utils.errors import (
    AuthorizationError,
    DatabaseError,
    ExternalServiceError,
    MatchExistsError,
    NotFoundError,
    ValidationError,
    WaggleError,
)
from waggle.utils.logging import configure_logging, get_logger, log_error

__all__ = [
    "AuthorizationError",
    "DatabaseError",
    "ExternalServiceError",
    "MatchExistsError",
    "NotFoundError",
    "ValidationError",
    "WaggleError",
    "configure_logging",
    "get_logger",
    "log_error",
]
