"""Workspace service for creating, renaming, listing and deleting workspaces."""

import logging
import uuid
from uuid import UUID

from sqlalchemy.orm import Session

from cloudspace.constants import (
    MSG_USER_NOT_FOUND,
    MSG_WORKSPACE_ALREADY_EXIST,
    MSG_WORKSPACE_ALREADY_LINKED,
    MSG_WORKSPACE_NOT_FOUND,
    MSG_WORKSPACE_NOT_LINKED_TO_USER,
)
from cloudspace.exceptions import ErrorType, ServiceError
from cloudspace.models.user import User
from cloudspace.models.workspace import UserWorkspace, Workspace
from cloudspace.repositories import (
    FileRepository,
    MembershipRepository,
    UserRepository,
    WorkspaceRepository,
)
from cloudspace.services.transactions import commit, flush_or_conflict
from cloudspace.storage import ObjectStorage
from cloudspace.utils.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Service for workspace lifecycle and membership operations.

    Workspace names are unique per owner. Every workspace is mirrored by a
    folder named after it in the owner's bucket.
    """

    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.users = UserRepository(db)
        self.workspaces = WorkspaceRepository(db)
        self.memberships = MembershipRepository(db)
        self.files = FileRepository(db)

    def create_workspace(self, user_id: UUID, name: str) -> Workspace:
        """Create a workspace owned by the user, with its folder and membership."""
        logger.info(f"Creating workspace '{name}' for user {user_id}")
        user = self._get_user(user_id)

        if self.workspaces.find_owned_by_name(user.id, name):
            logger.warning(f"Workspace already exists with name: {name}")
            raise ServiceError(ErrorType.CONFLICT, MSG_WORKSPACE_ALREADY_EXIST, name)

        bucket = user.bucket_name
        workspace = self.stage_workspace(user, name)
        commit(self.db, compensate=lambda: self.storage.delete_folder(bucket, name))

        logger.info(f"Workspace created: {workspace.id}")
        return workspace

    def stage_workspace(self, user: User, name: str) -> Workspace:
        """Add a workspace and the owner's membership, then create its folder.

        Rows are flushed but not committed. If the folder cannot be created the
        session is rolled back.
        """
        workspace = Workspace(id=uuid.uuid4(), name=name, owner=user)
        self.workspaces.add(workspace)
        self.memberships.add(UserWorkspace(user=user, workspace=workspace))
        flush_or_conflict(self.db, MSG_WORKSPACE_ALREADY_EXIST, name)

        try:
            self.storage.create_folder(user.bucket_name, name)
        except ServiceError:
            self.db.rollback()
            raise
        logger.debug(f"Folder '{name}' created for workspace {workspace.id}")
        return workspace

    def list_workspaces(self, user_id: UUID, page_request: PageRequest) -> Page[Workspace]:
        """Page through the workspaces the user is a member of."""
        logger.info(f"Fetching workspaces for user {user_id}")
        user = self._get_user(user_id)
        page = self.workspaces.page_for_member(user.id, page_request)
        logger.debug(f"Found {page.total_elements} workspaces for user {user_id}")
        return page

    def list_all_workspaces(self, user_id: UUID) -> list[Workspace]:
        logger.info(f"Fetching all workspaces for user {user_id}")
        user = self._get_user(user_id)
        return self.workspaces.list_for_member(user.id)

    def rename_workspace(self, user_id: UUID, workspace_id: UUID, new_name: str) -> Workspace:
        """Rename a workspace the user is a member of.

        Only the row changes; the folder and stored file paths keep the old name.
        """
        logger.info(f"Renaming workspace {workspace_id} to '{new_name}'")
        user = self._get_user(user_id)

        if self.workspaces.find_owned_by_name(user.id, new_name, exclude_id=workspace_id):
            logger.warning(f"Workspace name already exists: {new_name}")
            raise ServiceError(ErrorType.CONFLICT, MSG_WORKSPACE_ALREADY_EXIST, new_name)

        membership = self.memberships.get(user.id, workspace_id)
        if membership is None:
            logger.error(f"Workspace not found: {workspace_id}")
            raise ServiceError(ErrorType.NOT_FOUND, MSG_WORKSPACE_NOT_FOUND, workspace_id)

        workspace = membership.workspace
        workspace.name = new_name
        # A member renaming onto a name the owner already uses hits the constraint
        flush_or_conflict(self.db, MSG_WORKSPACE_ALREADY_EXIST, new_name)
        commit(self.db)

        logger.info(f"Workspace name updated: {workspace_id}")
        return workspace

    def delete_workspace(self, user_id: UUID, workspace_id: UUID) -> None:
        """Delete a workspace as its owner, or leave it as a member."""
        logger.info(f"Deleting workspace {workspace_id} for user {user_id}")
        user = self._get_user(user_id)

        membership = self.memberships.get(user.id, workspace_id)
        if membership is None:
            logger.error(f"Workspace not linked to user: {user_id}, ID: {workspace_id}")
            raise ServiceError(
                ErrorType.NOT_FOUND, MSG_WORKSPACE_NOT_LINKED_TO_USER, workspace_id, user_id
            )

        workspace = membership.workspace
        if workspace.owner_id != user.id:
            self.memberships.delete_by_user_and_workspace(user.id, workspace_id)
            commit(self.db)
            logger.info(f"User {user_id} left workspace {workspace_id}")
            return

        bucket = workspace.owner.bucket_name
        folder = workspace.name
        paths = self.files.paths_for_workspace(workspace_id)

        self.memberships.delete_by_workspace_id(workspace_id)
        self.files.delete_by_workspace_id(workspace_id)
        self.workspaces.delete(workspace)
        commit(self.db)

        # Rows first: a storage failure here leaves orphaned blobs, not dangling rows.
        # The folder prefix may also hold files of a workspace renamed away from it.
        self.storage.delete_objects(bucket, paths)
        self.storage.delete_folder(bucket, folder)

        logger.info(f"Workspace and its folder deleted: {workspace_id}")

    def join_workspace(self, user_id: UUID, workspace_id: UUID) -> Workspace:
        """Link the user to an existing workspace as a member."""
        logger.info(f"Adding workspace {workspace_id} for user {user_id}")
        user = self._get_user(user_id)

        if self.memberships.get(user.id, workspace_id) is not None:
            logger.warning(f"Workspace already linked to user: {workspace_id}")
            raise ServiceError(ErrorType.CONFLICT, MSG_WORKSPACE_ALREADY_LINKED, workspace_id)

        workspace = self.workspaces.get_by_id(workspace_id)
        if workspace is None:
            logger.error(f"Workspace not found: {workspace_id}")
            raise ServiceError(ErrorType.NOT_FOUND, MSG_WORKSPACE_NOT_FOUND, workspace_id)

        self.memberships.add(UserWorkspace(user=user, workspace=workspace))
        flush_or_conflict(self.db, MSG_WORKSPACE_ALREADY_LINKED, workspace_id)
        commit(self.db)

        logger.info(f"Workspace {workspace_id} linked to user {user_id}")
        return workspace

    def _get_user(self, user_id: UUID) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            logger.error(f"User not found: {user_id}")
            raise ServiceError(ErrorType.NOT_FOUND, MSG_USER_NOT_FOUND, user_id)
        return user
