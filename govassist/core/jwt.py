"""JWT verification utilities.

Tokens are issued elsewhere and signed with a shared secret; this module only
verifies them with PyJWT.
"""

from typing import Optional

import jwt

from govassist.core.config import settings
from govassist.core.exceptions import ConfigurationError
from govassist.schemas.auth import JWTClaims
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

PLACEHOLDER_SECRETS = frozenset({"", "change-me", "secret", "changeme"})


class JWTVerifier:
    """Verifier for HMAC-signed access tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: Optional[str] = None):
        """Initialize JWT verifier.

        Args:
            secret: Shared signing secret
            algorithm: Expected signing algorithm
            issuer: Expected ``iss`` claim, checked only when set
        """
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer

    def ensure_configured(self) -> None:
        """Refuse to run with a missing or well-known signing secret.

        Raises:
            ConfigurationError: If ``JWT_SECRET`` is unset or a placeholder
        """
        if self.secret.strip().lower() in PLACEHOLDER_SECRETS:
            raise ConfigurationError("JWT_SECRET must be set to a private signing secret")

    async def verify_token(self, token: str) -> JWTClaims:
        """Verify and decode an access token.

        Args:
            token: JWT access token from Authorization header

        Returns:
            Decoded and validated JWT claims

        Raises:
            jwt.InvalidTokenError: If token is invalid, expired or malformed
            ConfigurationError: If no usable signing secret is configured
        """
        self.ensure_configured()
        options = {"require": ["exp", "sub"]}
        kwargs = {"issuer": self.issuer} if self.issuer else {}
        payload = jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            options=options,
            **kwargs,
        )
        LOGGER.debug("Token verified", extra={"sub": payload.get("sub")})
        return JWTClaims(**payload)


jwt_verifier = JWTVerifier(
    secret=settings.auth.jwt_secret,
    algorithm=settings.auth.jwt_algorithm,
    issuer=settings.auth.jwt_issuer,
)
