"""FastAPI web application for usersvc."""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from usersvc.api.dependencies import get_user_repository, require_body
from usersvc.api.user_models import UserPayload
from usersvc.database.database import init_db
from usersvc.database.user_repository import UserRepository
from usersvc.models.user import User, has_required_fields, is_unchanged, is_valid_new_user
from usersvc.observability import setup_logging

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

INVALID_PAYLOAD = "Invalid request payload"
INVALID_NEW_USER = "Invalid input: Name is required and Email must be valid"
MISSING_FIELDS = "Name and Email are required"
DUPLICATE_USER = "User with the same name or email already exists"
EMAIL_IN_USE = "Email already in use by another user"
USER_NOT_FOUND = "User not found"
NO_CHANGES = "No changes detected"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_logging()
    init_db()
    logger.info("usersvc API started")
    yield
    logger.info("usersvc API shutting down")


# Initialize FastAPI app
app = FastAPI(
    title="usersvc API",
    description="Create, read, update and delete users",
    version=VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def json_content_type(request: Request, call_next):
    """Every response is declared as JSON, errors included."""
    response = await call_next(request)
    response.headers["Content-Type"] = "application/json"
    return response


@app.exception_handler(RequestValidationError)
async def invalid_payload_handler(request: Request, exc: RequestValidationError):
    """Undecodable or mistyped request bodies are a plain 400."""
    logger.warning(f"Invalid payload on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_PAYLOAD},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all so a failing request never takes the process down."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/users", response_model=List[User])
def list_users(repo: UserRepository = Depends(get_user_repository)):
    """List all users."""
    try:
        return repo.get_all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to list users: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching users")


@app.get("/users/{user_id}", response_model=User)
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    """Get a single user by ID."""
    try:
        user = repo.get(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch user {user_id}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching user")
    if user is None:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    return user


@app.post(
    "/users",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_body)],
)
def create_user(
    payload: Optional[UserPayload] = Body(None),
    repo: UserRepository = Depends(get_user_repository),
):
    """Create a user with a unique name and email."""
    if payload is None:
        payload = UserPayload()
    if not is_valid_new_user(payload.name, payload.email):
        raise HTTPException(status_code=400, detail=INVALID_NEW_USER)

    try:
        existing = repo.find_by_name_or_email(payload.name, payload.email)
    except SQLAlchemyError as e:
        logger.error(f"Failed to check for existing user: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error checking for existing user")
    if existing:
        logger.warning(f"Rejected duplicate user {payload.name} <{payload.email}> (conflicts with {existing.id})")
        raise HTTPException(status_code=409, detail=DUPLICATE_USER)

    try:
        return repo.create(payload.name, payload.email)
    except IntegrityError:
        # Lost a race against a concurrent create with the same name or email.
        raise HTTPException(status_code=409, detail=DUPLICATE_USER)
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error creating user")


@app.put("/users/{user_id}", response_model=User, dependencies=[Depends(require_body)])
def update_user(
    user_id: str,
    payload: Optional[UserPayload] = Body(None),
    repo: UserRepository = Depends(get_user_repository),
):
    """Replace a user's name and email.

    The response carries the stored row's id; an `id` in the body is ignored.
    """
    if payload is None:
        payload = UserPayload()
    if not has_required_fields(payload.name, payload.email):
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)

    try:
        other = repo.find_by_email_excluding(payload.email, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to check email for user {user_id}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error checking for existing user")
    if other:
        logger.warning(f"Rejected update of user {user_id}: {payload.email} belongs to user {other.id}")
        raise HTTPException(status_code=409, detail=EMAIL_IN_USE)

    try:
        current = repo.get(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch user {user_id}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching user")
    if current is None:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)

    if is_unchanged(current, payload.name, payload.email):
        raise HTTPException(status_code=400, detail=NO_CHANGES)

    try:
        return repo.update(User(id=current.id, name=payload.name, email=payload.email))
    except ValueError:
        # Deleted between the lookup and the write.
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_USER)
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error updating user")


@app.delete("/users/{user_id}")
def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    """Delete a user; deleting a missing ID still succeeds."""
    try:
        repo.delete(user_id)
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error deleting user")
    return "User deleted"


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
