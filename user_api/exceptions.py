"""
Custom exceptions for USER_API.

All errors derive from UserApiError, which carries a message plus a context
dict. The HTTP layer maps each subclass to its own status code.
"""

from typing import Any, Dict, List, Optional


class UserApiError(RuntimeError):
    """
    Base exception for User API errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection_name,
                 user_id, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(UserApiError):
    """
    Raised when configuration is invalid or missing.

    This exception is raised when required configuration
    parameters are missing or invalid, or when a database handle
    is absent at construction time.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class UserValidationError(UserApiError):
    """
    Raised when a User payload violates one or more field rules.

    Attributes:
        message: Error message
        errors: Mapping of dotted field path to the list of failure messages
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Dict[str, List[str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if errors:
            context["fields"] = sorted(errors)
        super().__init__(message, context=context)
        self.errors = errors or {}


class DuplicateUserError(UserApiError):
    """
    Raised when inserting a User whose identifier is already taken.

    Kept apart from infrastructure failures so callers can answer with a
    conflict instead of a server error.
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if user_id:
            context["user_id"] = user_id
        super().__init__(message, context=context)
        self.user_id = user_id
