"""FastAPI dependencies for store access and request bodies."""

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session

from usersvc.database.database import get_db
from usersvc.database.user_repository import UserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Build a UserRepository bound to the request's database session."""
    return UserRepository(db)


async def require_body(request: Request) -> None:
    """Reject requests that carry no body at all.

    A literal JSON `null` is a body and is accepted as an empty payload.
    """
    if not await request.body():
        raise RequestValidationError(
            [{"type": "missing", "loc": ("body",), "msg": "Field required", "input": None}]
        )
