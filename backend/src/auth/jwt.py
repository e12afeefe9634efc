"""Bearer token signing and validation.

End-user tokens come from the upstream identity service. This module
validates them; create_access_token exists for service callers and tests.

Claims: sub (user UUID), email, iat, exp. Tokens without sub or exp are
rejected.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Tuple
from uuid import UUID
import jwt

from config import get_settings

REQUIRED_CLAIMS = ["sub", "exp"]


def _signing_config() -> Tuple[str, str]:
    """Return (secret, algorithm); refuses to work without a secret."""
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET environment variable is not set")
    return settings.JWT_SECRET, settings.JWT_ALGORITHM


def create_access_token(user_id: UUID, email: str) -> str:
    secret, algorithm = _signing_config()
    issued = datetime.now(timezone.utc)
    expires = issued + timedelta(minutes=get_settings().JWT_EXPIRY_MINUTES)

    claims = {
        "sub": str(user_id),
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises:
        jwt.ExpiredSignatureError: Token is past its exp claim
        jwt.InvalidTokenError: Bad signature, malformed token or missing claim
        ValueError: JWT_SECRET is not configured
    """
    secret, algorithm = _signing_config()
    return jwt.decode(token, secret, algorithms=[algorithm], options={"require": REQUIRED_CLAIMS})
