"""File service for uploading, listing, downloading and deleting workspace files."""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from cloudspace.constants import (
    MSG_FILE_ALREADY_EXIST,
    MSG_FILE_INVALID_NAME,
    MSG_FILE_NOT_FOUND,
    MSG_FILE_NOT_IN_WORKSPACE,
    MSG_WORKSPACE_NOT_LINKED_TO_USER,
)
from cloudspace.exceptions import ErrorType, ServiceError
from cloudspace.models.file import File
from cloudspace.models.user import User
from cloudspace.models.workspace import UserWorkspace, Workspace
from cloudspace.repositories import FileRepository, MembershipRepository
from cloudspace.services.transactions import commit, flush_or_conflict
from cloudspace.storage import ObjectStorage
from cloudspace.utils.files import generate_relative_path, split_file_name
from cloudspace.utils.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


class Upload(Protocol):
    """An incoming file, as provided by FastAPI's ``UploadFile``."""

    filename: str | None
    file: BinaryIO

    @property
    def content_type(self) -> str | None: ...


@dataclass
class FileContent:
    """An open blob stream paired with its metadata. The caller closes the stream."""

    stream: BinaryIO
    file: File


class FileService:
    """Service for file operations scoped to a workspace.

    Blobs always live in the workspace owner's bucket, under
    ``<workspace name>/<base name>.<extension>``.
    """

    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.files = FileRepository(db)
        self.memberships = MembershipRepository(db)

    def upload_files(self, user_id: UUID, workspace_id: UUID, uploads: list[Upload]) -> list[File]:
        """Upload a batch of files.

        Each file is stored and committed on its own, so a failure partway
        through keeps the files before it.
        """
        logger.info(f"Uploading {len(uploads)} files to workspace {workspace_id}")
        membership = self._get_membership(user_id, workspace_id)

        stored = []
        for upload in uploads:
            logger.debug(f"Uploading file: {upload.filename} to workspace: {workspace_id}")
            stored.append(self.upload_file(upload, membership.workspace, membership.user))

        logger.info(f"Finished uploading files to workspace: {workspace_id}")
        return stored

    def upload_file(self, upload: Upload, workspace: Workspace, user: User) -> File:
        """Store one file, overwriting the blob in place when the name exists."""
        original_name = upload.filename
        if not original_name or not original_name.strip():
            logger.error("Invalid file name")
            raise ServiceError(ErrorType.BAD_REQUEST, MSG_FILE_INVALID_NAME)

        logger.info(f"User {user.id} uploading '{original_name}' to workspace {workspace.id}")
        file_name, file_extension = split_file_name(original_name)
        bucket = workspace.owner.bucket_name
        data = upload.file.read()

        existing = self.files.find_by_name(workspace.id, file_name, file_extension)
        if existing is not None:
            logger.warning(f"File already exists, overwriting: {existing.path}")
            self.storage.put_object(bucket, existing.path, data, upload.content_type)
            return existing

        path = generate_relative_path(workspace.name, file_name, file_extension)
        logger.debug(f"Generated relative path: {path}")
        new_file = File(
            workspace_id=workspace.id,
            file_name=file_name,
            file_extension=file_extension,
            path=path,
        )
        self.files.add(new_file)
        flush_or_conflict(self.db, MSG_FILE_ALREADY_EXIST, original_name, workspace.id)

        try:
            self.storage.put_object(bucket, path, data, upload.content_type)
        except ServiceError:
            self.db.rollback()
            raise
        commit(self.db, compensate=lambda: self.storage.delete_object(bucket, path))

        logger.info(f"File uploaded and saved: {path}")
        return new_file

    def get_files_info(
        self,
        user_id: UUID,
        workspace_id: UUID,
        page_request: PageRequest,
    ) -> Page[File]:
        logger.info(f"Fetching files info for workspace: {workspace_id}")
        self._get_membership(user_id, workspace_id)

        page = self.files.page_for_workspace(workspace_id, page_request)
        logger.debug(f"Fetched files for workspace: {workspace_id}, total: {page.total_elements}")
        return page

    def delete_file(self, user_id: UUID, file_id: UUID, workspace_id: UUID) -> None:
        """Delete a file's blob and then its row.

        The row deletion is only committed once the blob is gone.
        """
        logger.info(f"Deleting file: {file_id} from workspace: {workspace_id}")
        file = self._get_file(file_id, workspace_id)
        membership = self._get_membership(user_id, workspace_id)

        bucket = membership.workspace.owner.bucket_name
        path = file.path
        self.files.delete(file)
        self.db.flush()

        try:
            self.storage.delete_object(bucket, path)
        except ServiceError:
            self.db.rollback()
            raise
        commit(self.db)

        logger.info(f"File deleted: {file_id} from workspace: {workspace_id}")

    def download_file(self, user_id: UUID, file_id: UUID, workspace_id: UUID) -> FileContent:
        logger.info(f"Downloading file: {file_id} from workspace: {workspace_id}")
        file = self._get_file(file_id, workspace_id)
        membership = self._get_membership(user_id, workspace_id)

        bucket = membership.workspace.owner.bucket_name
        logger.debug(f"Fetching file stream from bucket: {bucket}, path: {file.path}")
        stream = self.storage.get_object_stream(bucket, file.path)
        return FileContent(stream=stream, file=file)

    def _get_membership(self, user_id: UUID, workspace_id: UUID) -> UserWorkspace:
        membership = self.memberships.get(user_id, workspace_id)
        if membership is None:
            logger.error(
                f"User is not linked to workspace: userId={user_id}, workspaceId={workspace_id}"
            )
            raise ServiceError(
                ErrorType.FORBIDDEN, MSG_WORKSPACE_NOT_LINKED_TO_USER, workspace_id, user_id
            )
        return membership

    def _get_file(self, file_id: UUID, workspace_id: UUID) -> File:
        file = self.files.get_by_id(file_id)
        if file is None:
            logger.error(f"File not found: {file_id}")
            raise ServiceError(ErrorType.BAD_REQUEST, MSG_FILE_NOT_FOUND, file_id)

        if file.workspace_id != workspace_id:
            logger.error(
                f"File does not belong to workspace: fileId={file_id}, workspaceId={workspace_id}"
            )
            raise ServiceError(
                ErrorType.FORBIDDEN, MSG_FILE_NOT_IN_WORKSPACE, file_id, workspace_id
            )
        return file
