"""
Portfolio Backend — Photo Schemas
===================================

What:  Pydantic models defining the photo API contract.
How:   Responses are built by PhotoService from ORM rows joined with their
       category; the update request keeps track of which fields the client
       actually sent so that only those are overwritten.

Listing row example:
    {
        "id": 7,
        "title": "Sunset",
        "description": "",
        "url": "https://res.cloudinary.com/demo/image/upload/v1/portfolio/abc.jpg",
        "media_id": "portfolio/abc",
        "original_name": "sunset.jpg",
        "category_id": null,
        "category_name": null,
        "category_slug": null,
        "is_featured": false,
        "order_index": 0,
        "upload_date": "2024-01-15T12:00:00Z"
    }
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PhotoResponse(BaseModel):
    """
    A photo as shown by the public listing and detail endpoints.

    category_name/category_slug come from a LEFT JOIN and are null when the
    photo has no category.
    """
    id: int
    title: str
    description: Optional[str] = None
    url: str = Field(description="Displayable image URL (stored verbatim)")
    media_id: str = Field(description="Media store identifier")
    original_name: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    is_featured: bool = False
    order_index: int = 0
    upload_date: datetime


class PhotoCreatedResponse(BaseModel):
    message: str = Field(default="Photo uploaded successfully")
    id: int
    title: str
    url: str
    media_id: str
    category_id: Optional[int] = None
    is_featured: bool = False
    upload_date: datetime


class PhotoUpdateRequest(BaseModel):
    """
    Metadata subset for PUT /api/photos/{id}.

    Fields left out of the request body are not modified; an explicit
    `"category_id": null` clears the category.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    is_featured: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PhotoUpdatedResponse(BaseModel):
    message: str = Field(default="Photo updated successfully")
    photo: PhotoResponse
