"""Authentication schemas for bearer tokens.

Identity is taken from already-issued tokens; users are not stored locally.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class JWTClaims(BaseModel):
    """Claims extracted from a verified access token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User email")
    role: str = Field(default="CITIZEN", description="User role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")
    iss: Optional[str] = Field(None, description="Token issuer")


class CurrentUser(BaseModel):
    """Authenticated user attached to a request."""

    id: UUID = Field(..., description="User ID from the token subject")
    email: Optional[str] = Field(None, description="User email")
    role: str = Field(default="CITIZEN", description="User role")
