"""User data model for usersvc."""

import re
from pydantic import BaseModel, Field

# Simple shape check: local@domain.tld with a 2+ letter TLD.
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class User(BaseModel):
    """User model for usersvc."""

    id: int = Field(..., description="Unique user identifier (assigned by the store)")
    name: str = Field(..., description="User name")
    email: str = Field(..., description="User email address")


def is_valid_email(email: str) -> bool:
    """Check that an email has the `local@domain.tld` shape."""
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_new_user(name: str, email: str) -> bool:
    """Check a create payload: name is required and email must be valid."""
    return bool(name) and is_valid_email(email)


def has_required_fields(name: str, email: str) -> bool:
    """Check an update payload: both name and email must be non-empty."""
    return bool(name) and bool(email)


def is_unchanged(current: User, name: str, email: str) -> bool:
    """True when the submitted name and email match the stored values."""
    return current.name == name and current.email == email
