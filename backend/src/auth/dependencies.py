"""FastAPI dependencies resolving the acting marketplace user.

Tokens are validated statelessly first (get_token_user_id); the user row
is then loaded and must be ACTIVE (get_current_user).

Usage:
    @router.get("/matches")
    def list_matches(user: User = Depends(get_current_user)):
        ...
"""

import logging
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from .jwt import decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_user_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> UUID:
    """Validate the Bearer token and return its subject as a UUID.

    Raises:
        HTTPException 401: If the token is expired, malformed, or has no usable subject
    """
    try:
        subject = decode_token(credentials.credentials).get("sub")
    except jwt.ExpiredSignatureError:
        raise _credentials_error("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise _credentials_error(f"Invalid token: {e}")

    if not subject:
        raise _credentials_error("Invalid token: missing user ID claim")

    try:
        return UUID(subject)
    except (ValueError, TypeError):
        raise _credentials_error("Invalid token: subject is not a user ID")


def get_current_user(
    user_id: UUID = Depends(get_token_user_id),
    db: Session = Depends(get_db)
) -> User:
    """Load the user named by the token.

    Raises:
        HTTPException 401: If the user does not exist
        HTTPException 403: If the user is DISABLED
    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _credentials_error("User not found")

    if user.status != "ACTIVE":
        logger.info(f"Disabled user {user_id} attempted access", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled")

    return user
