"""
Portfolio Backend — Category SQLAlchemy Model
===============================================

What:  ORM model for the `categories` table.
Who:   Seeded at bootstrap, listed by CategoryService, joined into photo
       listings for name/slug.

Categories are immutable through the API: three rows are seeded and no
endpoint creates, updates or deletes them.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # URL-safe unique short identifier (e.g. "retratos")
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"
