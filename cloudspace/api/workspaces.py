"""Workspace API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from cloudspace.api.dependencies import (
    get_current_user_id,
    get_page_request,
    get_workspace_service,
)
from cloudspace.schemas.workspace import (
    PageWorkspaceResponse,
    WorkspaceCreate,
    WorkspaceRename,
    WorkspaceResponse,
)
from cloudspace.services.workspace_service import WorkspaceService
from cloudspace.utils.pagination import PageRequest

router = APIRouter(prefix="/api/v1/workspaces", tags=["workspaces"])


@router.get("", response_model=PageWorkspaceResponse)
def get_workspaces(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    page_request: Annotated[PageRequest, Depends(get_page_request)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Get one page of the workspaces the current user belongs to."""
    page = workspace_service.list_workspaces(user_id, page_request)
    return PageWorkspaceResponse(
        content=[WorkspaceResponse.model_validate(w) for w in page.content],
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
        total_elements=page.total_elements,
    )


@router.get("/all", response_model=list[WorkspaceResponse])
def get_all_workspaces(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Get every workspace the current user belongs to."""
    workspaces = workspace_service.list_all_workspaces(user_id)
    return [WorkspaceResponse.model_validate(w) for w in workspaces]


@router.post("", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
def create_workspace(
    workspace_data: WorkspaceCreate,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Create a new workspace owned by the current user."""
    workspace = workspace_service.create_workspace(user_id, workspace_data.name)
    return WorkspaceResponse.model_validate(workspace)


@router.put("/{workspace_id}", response_model=WorkspaceResponse)
def rename_workspace(
    workspace_id: UUID,
    workspace_data: WorkspaceRename,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Rename a workspace."""
    workspace = workspace_service.rename_workspace(user_id, workspace_id, workspace_data.name)
    return WorkspaceResponse.model_validate(workspace)


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workspace(
    workspace_id: UUID,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Delete a workspace (owner) or leave it (member)."""
    workspace_service.delete_workspace(user_id, workspace_id)


@router.post("/{workspace_id}/join", status_code=status.HTTP_204_NO_CONTENT)
def join_workspace(
    workspace_id: UUID,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    workspace_service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    """Become a member of an existing workspace."""
    workspace_service.join_workspace(user_id, workspace_id)
