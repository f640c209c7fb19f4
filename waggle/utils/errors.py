"""Custom exceptions for the Waggle match service."""

from typing import Any, Dict, Optional


class WaggleError(Exception):
    """Base exception for all Waggle errors."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the error with a message and optional details.

        Args:
            message (str): Error message describing what went wrong.
            status_code (int): HTTP status code associated with the error (default 500).
            details (Optional[Dict[str, Any]]): Additional context or debug information.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(WaggleError):
    """Raised when a store read or write fails for infrastructure reasons."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the database error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 500, details)


class ValidationError(WaggleError):
    """Raised when data validation fails (e.g. a dog profile without owner)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the validation error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 400, details)


class AuthorizationError(WaggleError):
    """Raised when a user acts on a match they do not take part in."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the authorization error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 403, details)


class NotFoundError(WaggleError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the not found error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 404, details)


class MatchExistsError(WaggleError):
    """Raised when a live match already holds the pair key of a new match."""

    def __init__(self, message: str, pair_key: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the duplicate match error.

        Args:
            message (str): Error message.
            pair_key (str): Canonical key of the colliding pair.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        error_details = details or {}
        error_details["pair_key"] = pair_key
        self.pair_key = pair_key
        super().__init__(message, 409, error_details)


class ExternalServiceError(WaggleError):
    """Raised when an external service (push gateway, etc.) fails."""

    def __init__(self, message: str, service: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the external service error.

        Args:
            message (str): Error message.
            service (str): Name of the external service.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        error_details = details or {}
        error_details["service"] = service
        super().__init__(message, 502, error_details)
