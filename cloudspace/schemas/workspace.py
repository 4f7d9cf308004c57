"""Workspace schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceCreate(BaseModel):
    """Create a new workspace."""

    name: str = Field(..., min_length=1, max_length=255, pattern=r"^[^/]+$")


class WorkspaceRename(BaseModel):
    """Rename a workspace."""

    name: str = Field(..., min_length=1, max_length=255, pattern=r"^[^/]+$")


class WorkspaceResponse(BaseModel):
    """Workspace response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime


class PageWorkspaceResponse(BaseModel):
    """One page of workspaces."""

    content: list[WorkspaceResponse]
    page: int
    size: int
    total_pages: int
    total_elements: int
