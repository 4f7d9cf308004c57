"""User service for registration and login."""

import logging
import uuid
from uuid import UUID

from sqlalchemy.orm import Session

from cloudspace.config import get_settings
from cloudspace.constants import (
    MSG_INVALID_CREDENTIALS,
    MSG_USER_ALREADY_EXIST,
    MSG_USER_NOT_FOUND,
)
from cloudspace.exceptions import ErrorType, ServiceError
from cloudspace.models.user import User
from cloudspace.repositories import UserRepository
from cloudspace.services.auth import create_access_token, get_password_hash, verify_password
from cloudspace.services.transactions import commit, flush_or_conflict
from cloudspace.services.workspace_service import WorkspaceService
from cloudspace.storage import ObjectStorage

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts and their buckets."""

    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.users = UserRepository(db)
        self.default_workspace_name = get_settings().default_workspace_name

    def register(self, username: str, password: str) -> tuple[User, str]:
        """Create a user, provision their bucket and default workspace.

        Returns the user and a freshly issued access token.
        """
        logger.info(f"Attempting to create user with username: {username}")

        if self.users.get_by_username(username):
            logger.warning(f"User already exists with username: {username}")
            raise ServiceError(ErrorType.CONFLICT, MSG_USER_ALREADY_EXIST, username)

        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            username=username,
            password_hash=get_password_hash(password),
            bucket_name=str(user_id),
        )
        self.users.add(user)
        flush_or_conflict(self.db, MSG_USER_ALREADY_EXIST, username)

        try:
            self.storage.ensure_bucket(user.bucket_name)
        except ServiceError:
            self.db.rollback()
            raise
        logger.info(f"Bucket initialized for user: {user_id}")

        bucket, folder = user.bucket_name, self.default_workspace_name
        if folder:
            WorkspaceService(self.db, self.storage).stage_workspace(user, folder)
            commit(self.db, compensate=lambda: self.storage.delete_folder(bucket, folder))
        else:
            commit(self.db)
        logger.info(f"User created: {user_id}")

        return user, create_access_token(user)

    def authenticate(self, username: str, password: str) -> tuple[User, str]:
        """Check credentials and issue an access token."""
        logger.info(f"Authenticating user: {username}")
        user = self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Authentication failed for user: {username}")
            raise ServiceError(ErrorType.UNAUTHORIZED, MSG_INVALID_CREDENTIALS)

        return user, create_access_token(user)

    def get_user(self, user_id: UUID) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            logger.error(f"User not found: {user_id}")
            raise ServiceError(ErrorType.NOT_FOUND, MSG_USER_NOT_FOUND, user_id)
        return user
