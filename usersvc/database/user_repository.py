"""Repository for User database operations."""

import logging
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from usersvc.models.user import User
from usersvc.database.models import UserDB

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations.

    Identifiers arrive straight from the request path and are handed to the
    store as-is; the store decides whether a non-numeric id matches nothing
    or fails the query.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[User]:
        """Get all users in the store's natural scan order."""
        users_db = self.db.query(UserDB).all()
        return [user_db.to_pydantic() for user_db in users_db]

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def find_by_name_or_email(self, name: str, email: str) -> Optional[User]:
        """Get any user sharing the given name or the given email."""
        user_db = self.db.query(UserDB).filter(
            or_(UserDB.name == name, UserDB.email == email)
        ).first()
        return user_db.to_pydantic() if user_db else None

    def find_by_email_excluding(self, email: str, user_id: str) -> Optional[User]:
        """Get a user other than `user_id` that owns the given email."""
        user_db = self.db.query(UserDB).filter(
            UserDB.email == email,
            UserDB.id != user_id,
        ).first()
        return user_db.to_pydantic() if user_db else None

    def create(self, name: str, email: str) -> User:
        """Insert a new user and return it with its store-assigned ID."""
        try:
            user_db = UserDB(name=name, email=email)
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user_db.id}: {email}")
            return user_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user {email}: {type(e).__name__}: {str(e)}")
            raise

    def update(self, user: User) -> User:
        """Replace name and email of an existing user."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user.id).first()
        if not user_db:
            raise ValueError(f"User {user.id} not found")

        user_db.name = user.name
        user_db.email = user.email
        try:
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Updated user {user.id}: {user.email}")
            return user_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, user_id: str) -> int:
        """Hard-delete a user by ID.

        Returns:
            Number of rows removed (0 when the ID does not exist)
        """
        try:
            deleted = self.db.query(UserDB).filter(UserDB.id == user_id).delete(
                synchronize_session=False
            )
            self.db.commit()
            logger.debug(f"Deleted user {user_id} ({deleted} row(s))")
            return deleted
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {type(e).__name__}: {str(e)}")
            raise
