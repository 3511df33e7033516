"""Request models for the user endpoints."""

from pydantic import BaseModel, Field, field_validator


class UserPayload(BaseModel):
    """Request body for creating or replacing a user.

    Missing or null fields decode to empty strings so that the field checks,
    not the decoder, report them.
    """
    name: str = Field("", description="User name")
    email: str = Field("", description="User email address")

    @field_validator("name", "email", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v
