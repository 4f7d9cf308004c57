"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cloudspace.config import get_settings
from cloudspace.database import get_db
from cloudspace.services.file_service import FileService
from cloudspace.services.identity import resolve_principal_id
from cloudspace.services.user_service import UserService
from cloudspace.services.workspace_service import WorkspaceService
from cloudspace.storage import ObjectStorage, get_storage
from cloudspace.utils.pagination import PageRequest, build_page_request

# A missing or non-bearer header is anonymous; principal-scoped routes reject it
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """Get the authenticated user's id from the bearer token."""
    token = credentials.credentials if credentials else None
    return resolve_principal_id(token)


def get_page_request(
    page: Annotated[int | None, Query()] = None,
    page_size: Annotated[int | None, Query()] = None,
) -> PageRequest:
    """Build a page request from query parameters."""
    return build_page_request(page, page_size, get_settings().page_size)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db, storage)


def get_workspace_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> WorkspaceService:
    """Get workspace service with dependencies."""
    return WorkspaceService(db, storage)


def get_file_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> FileService:
    """Get file service with dependencies."""
    return FileService(db, storage)
