"""
User validation.

The rules themselves are the ``Field`` constraints on ``user_api.models``.
This module evaluates them against a payload and reports every failing
field at once, keyed by dotted path (``email``, ``company.name``,
``address.geo.lat``), so the same rule set serves the service layer and the
HTTP boundary.
"""

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import UserValidationError
from .models import User

logger = logging.getLogger(__name__)

ROOT_FIELD = "user"


def errors_by_field(error: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors into ``{dotted.path: [messages]}``."""
    report: dict[str, list[str]] = {}
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or ROOT_FIELD
        report.setdefault(path, []).append(item["msg"])
    return report


def validate_user(data: User | Mapping[str, Any] | Any) -> dict[str, list[str]]:
    """
    Check a User (or raw payload) against the User rules.

    Args:
        data: A User instance or a mapping as received from a client

    Returns:
        Mapping of failing field paths to messages; empty when valid
    """
    if isinstance(data, User):
        data = data.model_dump(by_alias=True, exclude_none=True)
    try:
        User.model_validate(data)
    except ValidationError as e:
        return errors_by_field(e)
    return {}


def parse_user(data: Mapping[str, Any] | Any) -> User:
    """
    Build a User from a raw payload.

    Raises:
        UserValidationError: With the full per-field report if any rule fails
    """
    try:
        return User.model_validate(data)
    except ValidationError as e:
        errors = errors_by_field(e)
        logger.debug(f"User payload rejected: {errors}")
        raise UserValidationError("User payload failed validation", errors=errors) from e


def ensure_valid(user: User) -> None:
    """Raise UserValidationError if ``user`` no longer satisfies the rules."""
    errors = validate_user(user)
    if errors:
        raise UserValidationError("User failed validation", errors=errors)
