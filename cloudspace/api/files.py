"""File API endpoints, scoped to a workspace."""

from collections.abc import Iterator
from typing import Annotated, BinaryIO
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from cloudspace.api.dependencies import get_current_user_id, get_file_service, get_page_request
from cloudspace.schemas.file import FileResponse, PageFileResponse
from cloudspace.services.file_service import FileService
from cloudspace.utils.pagination import PageRequest

router = APIRouter(prefix="/api/v1/workspaces/{workspace_id}/files", tags=["files"])

CHUNK_SIZE = 64 * 1024


def iter_stream(stream: BinaryIO) -> Iterator[bytes]:
    """Yield a blob stream in chunks and close it when done."""
    try:
        while chunk := stream.read(CHUNK_SIZE):
            yield chunk
    finally:
        stream.close()


@router.get("", response_model=PageFileResponse)
def get_files_info(
    workspace_id: UUID,
    response: Response,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    page_request: Annotated[PageRequest, Depends(get_page_request)],
    file_service: Annotated[FileService, Depends(get_file_service)],
):
    """Get one page of file metadata for a workspace."""
    page = file_service.get_files_info(user_id, workspace_id, page_request)
    response.headers["Total-Pages"] = str(page.total_pages)
    return PageFileResponse(
        content=[FileResponse.model_validate(f) for f in page.content],
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
        total_elements=page.total_elements,
    )


@router.post("", response_model=list[FileResponse], status_code=status.HTTP_201_CREATED)
def upload_files(
    workspace_id: UUID,
    files: Annotated[list[UploadFile], File()],
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    file_service: Annotated[FileService, Depends(get_file_service)],
):
    """Upload files, overwriting files that already have the same name."""
    stored = file_service.upload_files(user_id, workspace_id, files)
    return [FileResponse.model_validate(f) for f in stored]


@router.get("/{file_id}")
def download_file(
    workspace_id: UUID,
    file_id: UUID,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    file_service: Annotated[FileService, Depends(get_file_service)],
):
    """Download a file's content."""
    content = file_service.download_file(user_id, file_id, workspace_id)
    filename = quote(content.file.full_name)
    return StreamingResponse(
        iter_stream(content.stream),
        media_type="application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    workspace_id: UUID,
    file_id: UUID,
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    file_service: Annotated[FileService, Depends(get_file_service)],
):
    """Delete a file and its content."""
    file_service.delete_file(user_id, file_id, workspace_id)
