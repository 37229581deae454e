"""
Portfolio Backend — Photo Service (Upload Orchestrator + Repository)
======================================================================

What:  Create, list, read, update and delete portfolio photos.
How:   Composes ImageValidator, a MediaStore and the `photos` table.
Who:   Called by app/routes/photos.py with the request's AsyncSession.

Upload Flow (POST /api/photos):
    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌──────────┐
    │  Upload  │───▶│  Validate  │───▶│ Media Store  │───▶│  Insert  │
    │  (Route) │    │ (no I/O)   │    │ (1st effect) │    │  (DB)    │
    └──────────┘    └────────────┘    └──────────────┘    └──────────┘

    Validate fails    → 400, nothing stored anywhere
    Media store fails → 502, no row written
    Insert fails      → 500 PersistenceError. The remote object already
                        exists and nothing references it (orphaned), unless
                        compensate_orphaned_media is on, in which case it is
                        deleted best-effort before the error propagates.

Delete Flow (DELETE /api/photos/{id}):
    404 if the row is absent; otherwise the media object is deleted
    best-effort (failures logged, never raised) and the row is always deleted.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import MediaStoreError, NotFoundError, PersistenceError, ValidationError
from app.models.category import Category
from app.models.photo import Photo
from app.schemas.photo import PhotoCreatedResponse, PhotoResponse
from app.services.image_validation import ImageValidator
from app.services.media_store import MediaStore, StoredMedia

logger = logging.getLogger(__name__)

# Columns that cannot be NULL: an explicit null (or a blank title) in an update leaves them unchanged
NON_NULLABLE_FIELDS = {"title", "is_featured"}


class PhotoService:
    """
    Business logic for photos.

    Args:
        media_store: Backend receiving image bytes
        validator: Upload checks run before the media store is contacted
        folder: Logical media-store folder for every upload
        compensate_orphaned_media: Delete the uploaded object when the
            insert fails (off by default)
    """

    def __init__(
        self,
        media_store: MediaStore,
        validator: ImageValidator,
        folder: str = "portfolio",
        compensate_orphaned_media: bool = False,
    ):
        self.media_store = media_store
        self.validator = validator
        self.folder = folder
        self.compensate_orphaned_media = compensate_orphaned_media

    # ══════════════════════════════════════════════════════════════════════
    # Create
    # ══════════════════════════════════════════════════════════════════════

    async def create_photo(
        self,
        db: AsyncSession,
        filename: Optional[str],
        content_type: Optional[str],
        content: Optional[bytes],
        title: Optional[str] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        is_featured: bool = False,
    ) -> PhotoCreatedResponse:
        """
        Validate → upload to the media store → insert the row.

        Raises:
            NoFileError / UnsupportedFileTypeError / FileTooLargeError (400)
            ValidationError: category_id does not exist (400)
            MediaStoreError: media store failed; no row written (502)
            PersistenceError: insert failed after a successful upload (500)
        """
        # ── Step 1: Validate (no side effects) ────────────────────────────
        mime_type = self.validator.validate(filename, content_type, content)
        if category_id is not None:
            await self._ensure_category_exists(db, category_id)

        # ── Step 2: Media store upload (first side effect) ────────────────
        stored = await self.media_store.upload(
            content=content,
            filename=filename,
            content_type=mime_type,
            folder=self.folder,
        )

        # ── Step 3: Insert the row referencing the stored object ─────────
        photo = Photo(
            title=title or filename,
            description=description or "",
            media_id=stored.media_id,
            image_url=stored.url,
            original_name=filename,
            category_id=category_id,
            is_featured=bool(is_featured),
        )
        try:
            db.add(photo)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "Photo insert failed after media upload; media object %s is unreferenced: %s",
                stored.media_id,
                str(e),
            )
            if self.compensate_orphaned_media:
                await self._discard_orphan(stored)
            raise PersistenceError(
                message="The photo could not be saved. Please try again.",
                context={"operation": "create_photo", "media_id": stored.media_id},
            )

        logger.info("Photo %s created (media_id=%s)", photo.id, stored.media_id)
        return PhotoCreatedResponse(
            id=photo.id,
            title=photo.title,
            url=photo.image_url,
            media_id=photo.media_id,
            category_id=photo.category_id,
            is_featured=photo.is_featured,
            upload_date=photo.upload_date,
        )

    async def _discard_orphan(self, stored: StoredMedia) -> None:
        try:
            await self.media_store.delete(stored.media_id)
            logger.info("Compensation: removed orphaned media object %s", stored.media_id)
        except MediaStoreError as e:
            logger.error(
                "Compensation failed; media object %s remains orphaned: %s | %s",
                stored.media_id,
                e.message,
                e.context,
            )

    # ══════════════════════════════════════════════════════════════════════
    # Read
    # ══════════════════════════════════════════════════════════════════════

    @staticmethod
    def _listing_query():
        return (
            select(Photo, Category.name, Category.slug)
            .outerjoin(Category, Photo.category_id == Category.id)
        )

    @staticmethod
    def _to_response(photo: Photo, category_name: Optional[str], category_slug: Optional[str]) -> PhotoResponse:
        return PhotoResponse(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            url=photo.image_url,
            media_id=photo.media_id,
            original_name=photo.original_name,
            category_id=photo.category_id,
            category_name=category_name,
            category_slug=category_slug,
            is_featured=bool(photo.is_featured),
            order_index=photo.order_index or 0,
            upload_date=photo.upload_date,
        )

    async def list_photos(self, db: AsyncSession) -> List[PhotoResponse]:
        """
        All photos, ordered by order_index ASC, then upload_date DESC.

        Query plan:
            SELECT p.*, c.name, c.slug FROM photos p
            LEFT JOIN categories c ON p.category_id = c.id
            ORDER BY p.order_index ASC, p.upload_date DESC, p.id DESC
        """
        query = self._listing_query().order_by(
            Photo.order_index.asc(),
            Photo.upload_date.desc(),
            Photo.id.desc(),
        )
        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing photos: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not retrieve photos. Please try again.",
                context={"operation": "list_photos"},
            )
        return [self._to_response(photo, name, slug) for photo, name, slug in rows]

    async def get_photo(self, db: AsyncSession, photo_id: int) -> PhotoResponse:
        try:
            result = await db.execute(self._listing_query().where(Photo.id == photo_id))
            row = result.first()
        except SQLAlchemyError as e:
            logger.error("Database error fetching photo %s: %s", photo_id, str(e))
            raise PersistenceError(context={"operation": "get_photo", "photo_id": photo_id})

        if row is None:
            raise NotFoundError(resource="photo", resource_id=photo_id)
        photo, name, slug = row
        return self._to_response(photo, name, slug)

    # ══════════════════════════════════════════════════════════════════════
    # Update / Delete
    # ══════════════════════════════════════════════════════════════════════

    async def update_photo(
        self,
        db: AsyncSession,
        photo_id: int,
        changes: Dict[str, Any],
    ) -> PhotoResponse:
        """
        Overwrite the supplied subset of title/description/category_id/is_featured.

        The media object is never touched.
        """
        photo = await self._get_row(db, photo_id)

        if isinstance(changes.get("title"), str):
            changes["title"] = changes["title"].strip() or None
        changes = {
            field: value
            for field, value in changes.items()
            if not (field in NON_NULLABLE_FIELDS and value is None)
        }
        if changes.get("category_id") is not None:
            await self._ensure_category_exists(db, changes["category_id"])
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        for field, value in changes.items():
            setattr(photo, field, value)

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating photo %s: %s", photo_id, str(e))
            raise PersistenceError(context={"operation": "update_photo", "photo_id": photo_id})

        logger.info("Photo %s updated: %s", photo_id, sorted(changes))
        return await self.get_photo(db, photo_id)

    async def delete_photo(self, db: AsyncSession, photo_id: int) -> None:
        photo = await self._get_row(db, photo_id)

        try:
            await self.media_store.delete(photo.media_id)
        except MediaStoreError as e:
            # Best-effort cleanup: a media store failure never blocks the delete
            logger.warning(
                "Media object %s for photo %s could not be deleted: %s | %s",
                photo.media_id,
                photo_id,
                e.message,
                e.context,
            )

        try:
            await db.delete(photo)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting photo %s: %s", photo_id, str(e))
            raise PersistenceError(context={"operation": "delete_photo", "photo_id": photo_id})

        logger.info("Photo %s deleted", photo_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_row(self, db: AsyncSession, photo_id: int) -> Photo:
        try:
            result = await db.execute(select(Photo).where(Photo.id == photo_id))
            photo = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching photo %s: %s", photo_id, str(e))
            raise PersistenceError(context={"operation": "get_photo", "photo_id": photo_id})
        if photo is None:
            raise NotFoundError(resource="photo", resource_id=photo_id)
        return photo

    async def _ensure_category_exists(self, db: AsyncSession, category_id: int) -> None:
        try:
            result = await db.execute(select(Category.id).where(Category.id == category_id))
            found = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error checking category %s: %s", category_id, str(e))
            raise PersistenceError(context={"operation": "check_category", "category_id": category_id})
        if found is None:
            raise ValidationError(
                message=f"Category with ID '{category_id}' does not exist",
                field="category_id",
            )
