"""
Portfolio Backend — Category Service
======================================

Read-only access to the seeded categories, ordered by name.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import PersistenceError
from app.models.category import Category
from app.schemas.category import CategoryResponse

logger = logging.getLogger(__name__)


class CategoryService:
    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        try:
            result = await db.execute(select(Category).order_by(Category.name.asc()))
            categories = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not retrieve categories. Please try again.",
                context={"operation": "list_categories"},
            )
        return [CategoryResponse.model_validate(category) for category in categories]
