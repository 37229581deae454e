"""
Portfolio Backend — Category Route Handlers
=============================================

GET /api/categories — public, all categories ordered by name.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_category_service
from app.schemas.category import CategoryResponse
from app.schemas.common import ErrorResponse
from app.services.category_service import CategoryService

router = APIRouter(prefix="/api", tags=["Categories"])


@router.get(
    "/categories",
    response_model=List[CategoryResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List photo categories",
)
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
    category_service: CategoryService = Depends(get_category_service),
) -> List[CategoryResponse]:
    return await category_service.list_categories(db)
