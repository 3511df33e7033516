"""Data models for usersvc."""

from usersvc.models.user import (
    User,
    EMAIL_PATTERN,
    is_valid_email,
    is_valid_new_user,
    has_required_fields,
    is_unchanged,
)

__all__ = [
    "User",
    "EMAIL_PATTERN",
    "is_valid_email",
    "is_valid_new_user",
    "has_required_fields",
    "is_unchanged",
]
