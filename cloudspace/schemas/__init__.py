"""Pydantic schemas for API requests and responses."""

from cloudspace.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from cloudspace.schemas.error import ErrorResponse
from cloudspace.schemas.file import FileResponse, PageFileResponse
from cloudspace.schemas.workspace import (
    PageWorkspaceResponse,
    WorkspaceCreate,
    WorkspaceRename,
    WorkspaceResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "ErrorResponse",
    "FileResponse",
    "PageFileResponse",
    "WorkspaceCreate",
    "WorkspaceRename",
    "WorkspaceResponse",
    "PageWorkspaceResponse",
]
