"""
User Model

Represents an account that can log in and mutate the catalog.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base


class User(Base):
    """
    User model representing registered users.

    Table: users

    The plaintext password is never stored; password_hash holds the bcrypt
    hash produced by catalog.services.security.hash_password().

    Example:
        user = User(
            username="mluukkai",
            favorite_genre="Horror",
            password_hash=hash_password("secret"),
        )
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique login name"
    )

    password_hash: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    favorite_genre: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        comment="Genre used for recommendations in the client"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, username='{self.username}')"
