"""
Portfolio Backend — User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table (the credential store).
Who:   Read by AuthService for login and account updates; written at
       bootstrap when the default admin is seeded.

There is no registration endpoint: the only row is normally the admin
created at bootstrap.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """
    An account allowed to manage the portfolio.

    Invariants:
        - username is unique
        - password_hash is a salted one-way hash; the plain password is never
          stored, and the hash is never returned by the API or logged
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        # password_hash deliberately omitted
        return f"<User(id={self.id}, username='{self.username}')>"
