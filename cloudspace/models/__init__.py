"""SQLAlchemy models."""

from cloudspace.models.file import File
from cloudspace.models.user import User
from cloudspace.models.workspace import UserWorkspace, Workspace

__all__ = [
    "User",
    "Workspace",
    "UserWorkspace",
    "File",
]
