"""
Portfolio Backend — Database Bootstrap
========================================

What:  Brings an empty database to a usable state.
How:   Creates missing tables, then inserts the default admin and the three
       portfolio categories when they are not there yet.
Who:   Called from the application lifespan on every start.

Idempotent: running it against an already-seeded database changes nothing.
Existing rows are never overwritten, so an admin who changed their password
keeps it across restarts.
"""

import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import Database
from app.models.category import Category
from app.models.user import User
from app.services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {
        "name": "Retratos",
        "slug": "retratos",
        "description": "Fotografias de retratos profissionais",
    },
    {
        "name": "Paisagens",
        "slug": "paisagens",
        "description": "Fotografias de paisagens naturais",
    },
    {
        "name": "Eventos",
        "slug": "eventos",
        "description": "Fotografias de eventos e celebrações",
    },
]


async def seed_admin(db: AsyncSession, settings: Settings, password_hasher: PasswordHasher) -> bool:
    """Insert the configured admin unless that username exists. Returns True if inserted."""
    result = await db.execute(select(User.id).where(User.username == settings.admin_username))
    if result.scalar_one_or_none() is not None:
        return False

    db.add(
        User(
            username=settings.admin_username,
            password_hash=password_hasher.hash(settings.admin_password),
            email=settings.admin_email or None,
        )
    )
    # Password intentionally absent from the log line
    logger.info("Default admin user '%s' created", settings.admin_username)
    return True


async def seed_categories(db: AsyncSession) -> int:
    """Insert each default category whose slug is missing. Returns the number inserted."""
    result = await db.execute(select(Category.slug))
    existing = set(result.scalars().all())

    created = 0
    for category in DEFAULT_CATEGORIES:
        if category["slug"] in existing:
            continue
        db.add(Category(**category))
        created += 1

    if created:
        logger.info("Seeded %d default categories", created)
    return created


async def bootstrap_database(
    database: Database,
    settings: Settings,
    password_hasher: PasswordHasher,
) -> None:
    """
    Create tables and seed rows in one unit of work.

    Raises whatever the driver raises: a database that cannot be reached at
    startup aborts the lifespan, and the server does not start.
    """
    await database.create_all()
    async with database.session() as db:
        await seed_admin(db, settings, password_hasher)
        await seed_categories(db)
    logger.info("Database bootstrap complete")
