"""Authentication service for JWT and password handling."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from cloudspace.config import get_settings
from cloudspace.exceptions import TokenError
from cloudspace.models.user import User

settings = get_settings()

USER_ID_CLAIM = "user_id"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user: User) -> str:
    """Create a JWT access token for a user.

    The subject is the username and the ``user_id`` claim carries the user's UUID.
    """
    now = datetime.now(UTC)
    to_encode = {
        "sub": user.username,
        USER_ID_CLAIM: str(user.id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, verify_exp: bool = True) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": verify_exp},
        )
    except JWTError as e:
        raise TokenError(str(e)) from e


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        TokenError: signature mismatch, malformed token, wrong algorithm or
            expired token.
    """
    return _decode(token)


def extract_username(token: str) -> str | None:
    return decode_access_token(token).get("sub")


def is_token_valid(token: str, username: str) -> bool:
    """Check that a verified token was issued for the given username."""
    return extract_username(token) == username


def is_token_expired(token: str) -> bool:
    """Check the embedded expiration against the current time.

    The signature is still verified, so a forged token raises ``TokenError``.
    """
    exp = _decode(token, verify_exp=False).get("exp")
    if exp is None:
        raise TokenError("Token has no expiration")
    return datetime.fromtimestamp(exp, UTC) < datetime.now(UTC)
