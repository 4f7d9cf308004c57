"""Commit helpers for operations that also write to the object store.

The database and the object store share no transaction. Services stage their
rows and flush, perform the object-store call, and only then commit. A failed
object-store call rolls the session back; a failed commit runs a compensating
object-store action, so a partial failure leaves at worst an orphaned blob,
never a row pointing at a missing one.
"""

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cloudspace.constants import MSG_DATABASE_ERROR
from cloudspace.exceptions import ErrorType, ServiceError

logger = logging.getLogger(__name__)


def flush_or_conflict(db: Session, template: str, *args: object) -> None:
    """Flush staged rows, turning a unique constraint violation into a conflict."""
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Unique constraint violated: {e.orig}")
        raise ServiceError(ErrorType.CONFLICT, template, *args) from e


def commit(db: Session, compensate: Callable[[], None] | None = None) -> None:
    """Commit the session, undoing the object-store side on failure."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Commit failed: {e}")
        if compensate is not None:
            try:
                compensate()
            except ServiceError as cleanup_error:
                logger.error(f"Compensation failed, object store needs cleanup: {cleanup_error}")
        raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_DATABASE_ERROR) from e
