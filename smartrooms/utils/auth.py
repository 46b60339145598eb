import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyHeader
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from smartrooms.config import settings
from smartrooms.db import get_db
from smartrooms.errors import Forbidden, Unauthorized
from smartrooms.models.user import User

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Session token travels in a custom header rather than Authorization
token_header = APIKeyHeader(
    name="x-access-token",
    scheme_name="AccessToken",
    description="Token returned by /api/auth/signin.",
    auto_error=False,
)


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def create_access_token(user_id: int) -> str:
    """Create a signed token carrying only the user id."""
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)
    to_encode = {"id": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: Optional[str]) -> int:
    """Check signature and expiry and return the user id in the token."""
    if not token:
        raise Forbidden("No token provided!")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise Unauthorized("Unauthorized!")
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise Unauthorized("Unauthorized!")
    return user_id


def get_current_user(
    token: Optional[str] = Depends(token_header),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from the x-access-token header."""
    user_id = verify_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("Unauthorized!")
    return user
