"""File schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FileResponse(BaseModel):
    """File metadata response. ``file_name`` includes the extension."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    workspace_id: UUID
    file_name: str = Field(validation_alias="full_name")
    path: str
    created_at: datetime


class PageFileResponse(BaseModel):
    """One page of files."""

    content: list[FileResponse]
    page: int
    size: int
    total_pages: int
    total_elements: int
