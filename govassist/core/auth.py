"""Authentication dependencies for FastAPI routes.

This module provides FastAPI dependency injection functions that
identify the caller from a bearer JWT and gate routes by role.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from govassist.core.exceptions import ConfigurationError
from govassist.core.jwt import jwt_verifier
from govassist.schemas.auth import CurrentUser
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Authorization credentials (automatically injected)

    Returns:
        CurrentUser: Authenticated user information

    Raises:
        HTTPException: If token is missing, invalid, or expired
    """
    if not credentials:
        LOGGER.warning("No authorization credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await jwt_verifier.verify_token(credentials.credentials)
        user = CurrentUser(id=claims.sub, email=claims.email, role=claims.role)
        LOGGER.debug(f"Authenticated user: {user.id}")
        return user

    except ConfigurationError as e:
        LOGGER.error(f"Token verification unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        ) from e
    except (jwt.InvalidTokenError, PydanticValidationError) as e:
        LOGGER.warning(f"Invalid token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[CurrentUser]:
    """Get the current user if authenticated, None otherwise.

    Anonymous chat is allowed, so missing or invalid tokens simply yield None.
    """
    if not credentials:
        return None

    try:
        return await get_current_user(credentials)
    except HTTPException:
        return None


def require_any_role(*required_roles: str):
    """Create a dependency that requires any of the specified roles.

    Args:
        required_roles: Roles that are allowed access

    Returns:
        Dependency function that checks if user has any required role
    """
    async def role_checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in required_roles:
            LOGGER.warning(f"Access denied for user {user.id}: role '{user.role}' not in allowed roles {required_roles}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required roles: {', '.join(required_roles)}",
            )
        return user

    return role_checker


require_admin = require_any_role("ADMIN", "SUPER_ADMIN")
