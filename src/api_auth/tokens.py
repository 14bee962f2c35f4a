"""
Signed token issuance.

Tokens are JWTs binding the user id, email and a snapshot of the user's roles
at login time. They are not re-checked against later role changes; a token
stays valid until its exp claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable

import jwt

from api_auth.errors import AuthError, ErrorKind
from api_auth.logging import get_logger

logger = get_logger(__name__)


class TokenIssuer:
    """Signs identity + roles claim sets with a process-wide key."""

    def __init__(self, secret: str, algorithm: str = "HS256", expiry_seconds: int = 7 * 24 * 3600, issuer: str = "api-auth"):
        if secret and len(secret) < 32:
            logger.warning("jwt_secret_short", detail="JWT_SECRET is shorter than 32 bytes")
        self.secret = secret
        self.algorithm = algorithm
        self.expiry_seconds = expiry_seconds
        self.issuer = issuer

    def make_token(self, user_id: str, email: str, roles: Iterable[str]) -> str:
        if not self.secret:
            raise AuthError(ErrorKind.SIGNING_FAILURE, "Token signing key is not configured")

        now = datetime.now(timezone.utc)
        claims = {
            "id": user_id,
            "sub": user_id,
            "email": email,
            "roles": list(roles),
            "iss": self.issuer,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiry_seconds),
        }
        try:
            return jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            logger.error("token_signing_failed", algorithm=self.algorithm, error=str(e))
            raise AuthError(ErrorKind.SIGNING_FAILURE, f"Failed to sign token: {e}") from e

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and issuer; return the claims."""
        return jwt.decode(token, self.secret, algorithms=[self.algorithm], issuer=self.issuer)
