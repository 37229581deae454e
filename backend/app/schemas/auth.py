"""
Portfolio Backend — Authentication Schemas
============================================

What:  Pydantic models for the /api/auth endpoints.
How:   Request fields are Optional so that absent values reach the service
       and produce the API's own 400 response instead of a schema error.
       Client-facing names follow the frontend (currentPassword/newPassword);
       snake_case names are accepted too.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Requests
# ══════════════════════════════════════════════════════════════════════════

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class ProfileUpdateRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Responses
# ══════════════════════════════════════════════════════════════════════════

class UserPublic(BaseModel):
    """
    Public projection of a user. Never includes the password hash.
    """
    id: int
    username: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class TokenClaims(BaseModel):
    """
    Decoded bearer token payload.

    `exp` and `iat` are POSIX timestamps (seconds).
    """
    id: int
    username: str
    email: Optional[str] = None
    exp: int
    iat: Optional[int] = None

    def to_user(self) -> UserPublic:
        return UserPublic(id=self.id, username=self.username, email=self.email)


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    token: str = Field(description="Signed bearer token")
    user: UserPublic


class VerifyResponse(BaseModel):
    valid: bool = True
    user: UserPublic


class ProfileResponse(BaseModel):
    message: str = Field(default="Profile updated successfully")
    user: UserPublic
    token: str = Field(description="New bearer token carrying the updated claims")


class MessageResponse(BaseModel):
    message: str
