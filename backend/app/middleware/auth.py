"""
Portfolio Backend — Bearer Token Authentication
=================================================

What:  FastAPI dependency guarding the admin endpoints.
How:   Reads `Authorization: Bearer <token>`, verifies it with the
       application's TokenService and attaches the claims to the request.
Who:   Declared by mutating routes via `Depends(require_auth)`.

Outcomes:
    no header / not a Bearer header → MissingTokenError (401)
    token rejected                  → InvalidTokenError subclass (403)
    token accepted                  → TokenClaims, also on request.state.user

Claims live for the request only; nothing is cached between requests.
"""

import logging

from fastapi import Request

from app.exceptions import MissingTokenError
from app.schemas.auth import TokenClaims
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        raise MissingTokenError()
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingTokenError()
    return token


async def require_auth(request: Request) -> TokenClaims:
    token = extract_bearer_token(request)
    token_service: TokenService = request.app.state.token_service
    claims = token_service.verify(token)
    request.state.user = claims
    logger.debug("Authenticated user id=%s", claims.id)
    return claims
