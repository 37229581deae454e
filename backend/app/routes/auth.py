"""
Portfolio Backend — Auth Route Handlers
=========================================

What:  Login, token verification, password change and profile update.
How:   Thin handlers: parse the body, delegate to AuthService, shape the response.
Who:   Called by the admin frontend.

Endpoints:
    POST /api/auth/login            → {message, token, user}
    GET  /api/auth/verify           → {valid, user}             (bearer)
    PUT  /api/auth/change-password  → {message}                 (bearer)
    PUT  /api/auth/profile          → {message, user, token}    (bearer)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_auth_service
from app.middleware.auth import require_auth
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    TokenClaims,
    VerifyResponse,
)
from app.schemas.common import ErrorResponse
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Username or password missing", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return await auth_service.login(db, body.username, body.password)


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={
        401: {"description": "No bearer token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
    summary="Check a bearer token",
)
async def verify(claims: TokenClaims = Depends(require_auth)) -> VerifyResponse:
    return VerifyResponse(valid=True, user=claims.to_user())


@router.put(
    "/change-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or new password too short", "model": ErrorResponse},
        403: {"description": "Current password incorrect or token rejected", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Change the authenticated user's password",
)
async def change_password(
    body: ChangePasswordRequest,
    claims: TokenClaims = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.change_password(db, claims.id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.put(
    "/profile",
    response_model=ProfileResponse,
    responses={
        400: {"description": "Username missing or already taken", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Update username and email",
    description="Returns a fresh token; the previous one still carries the old claims.",
)
async def update_profile(
    body: ProfileUpdateRequest,
    claims: TokenClaims = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    user, token = await auth_service.update_profile(
        db,
        claims.id,
        body.username,
        body.email,
        update_email="email" in body.model_fields_set,
    )
    return ProfileResponse(user=user, token=token)
