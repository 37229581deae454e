"""
Portfolio Backend — Bearer Token Issuer/Verifier
==================================================

What:  Signs and verifies the stateless bearer tokens used by the admin API.
How:   HMAC-signed JWT (PyJWT) carrying {id, username, email, iat, exp}.
Who:   AuthService issues tokens at login/profile update; the auth
       dependency verifies them on every protected request.

Limitations (kept on purpose):
    - No revocation list: a leaked token stays valid until its `exp`.
    - No refresh tokens: clients log in again after expiry.
    - Logout is a client-side no-op (the client drops the token).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.exceptions import (
    BadSignatureError,
    ConfigurationError,
    MalformedTokenError,
    TokenExpiredError,
)
from app.schemas.auth import TokenClaims, UserPublic

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["exp", "id", "username"]


class TokenService:
    """
    Issues and verifies HS256 bearer tokens.

    Args:
        secret: Process-wide signing key. Empty → ConfigurationError, so an
                application cannot be built without one.
        ttl: Default lifetime of issued tokens.
        algorithm: HMAC algorithm name understood by PyJWT.
    """

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24), algorithm: str = "HS256"):
        if not secret or not secret.strip():
            raise ConfigurationError("JWT_SECRET is not set; refusing to issue unsigned tokens")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, user: UserPublic, ttl: Optional[timedelta] = None) -> str:
        """
        Sign a token for `user`, expiring `ttl` (default: self.ttl) from now.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "iat": int(now.timestamp()),
            "exp": int((now + (ttl if ttl is not None else self.ttl)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and check a token.

        Returns:
            TokenClaims for a well-formed, correctly signed, unexpired token.

        Raises:
            TokenExpiredError: current time is past `exp`
            BadSignatureError: signature does not match the configured secret
            MalformedTokenError: anything else (not a JWT, missing claims, ...)
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected bearer token: expired")
            raise TokenExpiredError()
        except jwt.InvalidSignatureError:
            logger.warning("Rejected bearer token: bad signature")
            raise BadSignatureError()
        except jwt.InvalidTokenError as e:
            logger.warning("Rejected bearer token: malformed (%s)", type(e).__name__)
            raise MalformedTokenError(context={"error_type": type(e).__name__})

        try:
            return TokenClaims.model_validate(payload)
        except ValueError as e:
            logger.warning("Rejected bearer token: unexpected claim types")
            raise MalformedTokenError(context={"error_type": type(e).__name__})
