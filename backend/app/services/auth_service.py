"""
Portfolio Backend — Auth Service
==================================

What:  Login, password change and profile update for portfolio admins.
How:   Composes the credential store (User rows), the PasswordHasher and the
       TokenService. Routes pass in the request's AsyncSession.
Who:   Called by app/routes/auth.py.

Login contract:
    1. username or password absent/empty → MissingInputError (400)
    2. unknown username                  → InvalidCredentialsError (401)
    3. wrong password                    → InvalidCredentialsError (401)
       (same message as 2; callers cannot tell the two apart)
    4. success → signed token + public user projection (no hash)
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    IncorrectPasswordError,
    InvalidCredentialsError,
    MissingInputError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from app.models.user import User
from app.schemas.auth import LoginResponse, UserPublic
from app.services.password_hasher import PasswordHasher
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """
    Account operations. Stateless apart from its collaborators; one instance
    is shared by all requests.
    """

    def __init__(self, token_service: TokenService, password_hasher: PasswordHasher):
        self.token_service = token_service
        self.password_hasher = password_hasher

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> LoginResponse:
        if not username or not password:
            raise MissingInputError("Username and password are required")

        user = await self._get_by_username(db, username)
        if user is None:
            logger.info("Login failed: unknown username")
            raise InvalidCredentialsError(context={"reason": "unknown_user"})

        if not self.password_hasher.verify(password, user.password_hash):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            raise InvalidCredentialsError(context={"reason": "wrong_password", "user_id": user.id})

        public = UserPublic.model_validate(user)
        token = self.token_service.issue(public)
        logger.info("User id=%s logged in", user.id)
        return LoginResponse(token=token, user=public)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: int,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace the stored hash after checking the current password.

        Raises:
            MissingInputError: either field absent/empty (400)
            ValidationError: new password shorter than MIN_PASSWORD_LENGTH (400)
            NotFoundError: the token's user no longer exists (404)
            IncorrectPasswordError: current password does not match (403)
        """
        if not current_password or not new_password:
            raise MissingInputError("Current password and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="newPassword",
            )

        user = await self._get_by_id(db, user_id)
        if not self.password_hasher.verify(current_password, user.password_hash):
            logger.info("Password change refused for user id=%s: wrong current password", user_id)
            raise IncorrectPasswordError()

        user.password_hash = self.password_hasher.hash(new_password)
        await self._commit(db, "change_password", user_id)
        logger.info("Password changed for user id=%s", user_id)

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: int,
        username: Optional[str],
        email: Optional[str],
        update_email: bool = True,
    ) -> Tuple[UserPublic, str]:
        """
        Update username/email and return the new projection with a fresh token.

        With update_email=False the stored email is kept; otherwise an empty
        or null email clears it.

        Tokens embed username and email, so the old token keeps the old values
        until it expires; clients should switch to the returned one.
        """
        username = (username or "").strip()
        if not username:
            raise MissingInputError("Username is required", field="username")

        user = await self._get_by_id(db, user_id)

        if username != user.username:
            existing = await self._get_by_username(db, username)
            if existing is not None and existing.id != user.id:
                raise ValidationError("Username is already in use", field="username")

        user.username = username
        if update_email:
            user.email = (email or "").strip() or None
        await self._commit(db, "update_profile", user_id)

        public = UserPublic.model_validate(user)
        logger.info("Profile updated for user id=%s", user_id)
        return public, self.token_service.issue(public)

    # ── Credential store access ───────────────────────────────────────────

    async def _get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise PersistenceError(context={"operation": "get_user_by_username"})

    async def _get_by_id(self, db: AsyncSession, user_id: int) -> User:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise PersistenceError(context={"operation": "get_user_by_id", "user_id": user_id})
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def _commit(self, db: AsyncSession, operation: str, user_id: int) -> None:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error during %s for user %s: %s", operation, user_id, str(e))
            await db.rollback()
            raise PersistenceError(context={"operation": operation, "user_id": user_id})
