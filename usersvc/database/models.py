"""SQLAlchemy database models for usersvc."""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from usersvc.database.database import Base


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"
    __table_args__ = (
        # Store-level uniqueness; the handlers' pre-checks alone race under concurrency.
        UniqueConstraint("name", name="uq_users_name"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    # Primary key (assigned by the store)
    id = Column(Integer, primary_key=True, autoincrement=True)

    # User profile
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from usersvc.models.user import User
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
        )

