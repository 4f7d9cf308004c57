"""Resolve the authenticated principal from a bearer token."""

import logging
from uuid import UUID

from cloudspace.constants import MSG_JWT_ERROR
from cloudspace.exceptions import ErrorType, ServiceError, TokenError
from cloudspace.services.auth import USER_ID_CLAIM, decode_access_token

logger = logging.getLogger(__name__)


def resolve_principal_id(token: str | None) -> UUID:
    """Return the user id carried by a bearer token.

    Raises an unauthorized ``ServiceError`` when the token is missing, fails
    validation, or has no usable ``user_id`` claim.
    """
    if not token or not token.strip():
        logger.warning("JWT token is missing or empty")
        raise ServiceError(ErrorType.UNAUTHORIZED, MSG_JWT_ERROR)

    try:
        payload = decode_access_token(token)
    except TokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        raise ServiceError(ErrorType.UNAUTHORIZED, MSG_JWT_ERROR) from e

    raw_user_id = payload.get(USER_ID_CLAIM)
    if not isinstance(raw_user_id, str):
        logger.warning("JWT token has no user id claim")
        raise ServiceError(ErrorType.UNAUTHORIZED, MSG_JWT_ERROR)

    try:
        user_id = UUID(raw_user_id)
    except ValueError as e:
        logger.warning(f"JWT token carries a malformed user id: {raw_user_id!r}")
        raise ServiceError(ErrorType.UNAUTHORIZED, MSG_JWT_ERROR) from e

    logger.debug(f"Resolved principal {user_id}")
    return user_id
