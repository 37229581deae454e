"""
Portfolio Backend — Photo SQLAlchemy Model
============================================

What:  ORM model for the `photos` table (the photo repository).
How:   Each row references an object held by the media store through two
       opaque strings: `media_id` (what the store needs to delete it) and
       `image_url` (what clients display). Neither is interpreted here.
Who:   Written by PhotoService (create, update, delete); read by listings.

Table Design:
    - category_id is nullable; deleting a category sets it to NULL and never
      deletes the photo (ON DELETE SET NULL)
    - listing order is order_index ASC, upload_date DESC
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Photo(Base):
    """
    A portfolio photo.

    Lifecycle:
        1. Created by the upload orchestrator after the media store accepted
           the bytes (media_id and image_url come from the store)
        2. Metadata (title, description, category, featured) updated in place
        3. Deleted by id; the remote media object is removed best-effort
    """

    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default="")

    # ── Media Reference ───────────────────────────────────────────────────
    # Local backend: relative path under the upload root (portfolio/<uuid>.jpg)
    # Cloudinary backend: public_id (portfolio/abc123)
    media_id: Mapped[str] = mapped_column(String(512), nullable=False)

    # Absolute URL, surfaced verbatim to clients
    image_url: Mapped[str] = mapped_column(Text, nullable=False)

    original_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_photos_listing_order", order_index, upload_date.desc()),
    )

    def __repr__(self) -> str:
        return f"<Photo(id={self.id}, title='{self.title}', media_id='{self.media_id}')>"
