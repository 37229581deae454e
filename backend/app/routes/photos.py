"""
Portfolio Backend — Photo Route Handlers
==========================================

What:  Public photo listing/detail and the authenticated upload, update and
       delete endpoints.
How:   Multipart parsing and form-value coercion happen here; everything else
       is delegated to PhotoService.
Who:   Public gallery (GET) and admin frontend (POST/PUT/DELETE).

Upload Request (multipart/form-data):
    file         image bytes (required)
    title        optional, defaults to the original filename
    description  optional, defaults to ""
    category_id  optional integer; "" or absent means no category
    is_featured  optional; "true", "1", "on", "yes" mean true
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_photo_service
from app.exceptions import NoFileError, ValidationError
from app.middleware.auth import require_auth
from app.schemas.auth import MessageResponse, TokenClaims
from app.schemas.common import ErrorResponse
from app.schemas.photo import (
    PhotoCreatedResponse,
    PhotoResponse,
    PhotoUpdatedResponse,
    PhotoUpdateRequest,
)
from app.services.photo_service import PhotoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Photos"])

TRUE_FORM_VALUES = {"true", "1", "on", "yes"}


def parse_form_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUE_FORM_VALUES


def parse_form_category_id(value: Optional[str]) -> Optional[int]:
    value = (value or "").strip()
    if value in ("", "null", "undefined"):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid category_id '{value}'", field="category_id")


@router.get(
    "/photos",
    response_model=List[PhotoResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all photos",
    description="Ordered by order_index ascending, then newest upload first.",
)
async def list_photos(
    db: AsyncSession = Depends(get_db_session),
    photo_service: PhotoService = Depends(get_photo_service),
) -> List[PhotoResponse]:
    return await photo_service.list_photos(db)


@router.get(
    "/photos/{photo_id}",
    response_model=PhotoResponse,
    responses={404: {"description": "Photo not found", "model": ErrorResponse}},
    summary="Get a single photo",
)
async def get_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db_session),
    photo_service: PhotoService = Depends(get_photo_service),
) -> PhotoResponse:
    return await photo_service.get_photo(db, photo_id)


@router.post(
    "/photos",
    response_model=PhotoCreatedResponse,
    responses={
        400: {"description": "No file, unsupported type, too large or unknown category", "model": ErrorResponse},
        401: {"description": "No bearer token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
        500: {"description": "Photo could not be saved", "model": ErrorResponse},
        502: {"description": "Media store failed", "model": ErrorResponse},
    },
    summary="Upload a photo",
)
async def upload_photo(
    file: Optional[UploadFile] = File(default=None, description="Image file (JPEG, PNG, GIF, WebP)"),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category_id: Optional[str] = Form(default=None),
    is_featured: Optional[str] = Form(default=None),
    claims: TokenClaims = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    photo_service: PhotoService = Depends(get_photo_service),
) -> PhotoCreatedResponse:
    parsed_category_id = parse_form_category_id(category_id)

    if file is None:
        raise NoFileError()

    try:
        content = await file.read()
        logger.info(
            "Upload by user id=%s: filename=%s size=%d bytes",
            claims.id,
            file.filename or "unknown",
            len(content),
        )
        return await photo_service.create_photo(
            db,
            filename=file.filename,
            content_type=file.content_type,
            content=content,
            title=(title or "").strip() or None,
            description=description,
            category_id=parsed_category_id,
            is_featured=parse_form_bool(is_featured),
        )
    finally:
        await file.close()


@router.put(
    "/photos/{photo_id}",
    response_model=PhotoUpdatedResponse,
    responses={
        400: {"description": "Unknown category", "model": ErrorResponse},
        404: {"description": "Photo not found", "model": ErrorResponse},
    },
    summary="Update photo metadata",
)
async def update_photo(
    photo_id: int,
    body: PhotoUpdateRequest,
    claims: TokenClaims = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    photo_service: PhotoService = Depends(get_photo_service),
) -> PhotoUpdatedResponse:
    photo = await photo_service.update_photo(db, photo_id, body.changes())
    return PhotoUpdatedResponse(photo=photo)


@router.delete(
    "/photos/{photo_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Photo not found", "model": ErrorResponse}},
    summary="Delete a photo",
    description="The media object is removed best-effort; the row is always deleted.",
)
async def delete_photo(
    photo_id: int,
    claims: TokenClaims = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    photo_service: PhotoService = Depends(get_photo_service),
) -> MessageResponse:
    await photo_service.delete_photo(db, photo_id)
    return MessageResponse(message="Photo deleted successfully")
