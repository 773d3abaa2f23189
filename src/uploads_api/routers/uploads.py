import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from uploads_api.dependencies import get_retrieval_handler, get_upload_handler
from uploads_api.schemas import (
    ErrorResponse,
    FilesExistResponse,
    GetFilesResponse,
    UploadFilesResponse,
)
from uploads_api.services import IncomingFile, RetrievalHandler, UploadHandler

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_upload(upload: UploadFile) -> IncomingFile:
    data = await upload.read()
    return IncomingFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        size=upload.size if upload.size is not None else len(data),
        data=data,
    )


@router.post(
    "/uploadfiles",
    response_model=Union[UploadFilesResponse, FilesExistResponse],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def upload_files(
    task_id: Optional[str] = Form(None, alias="taskId", description="Task the files belong to"),
    files: Optional[List[UploadFile]] = File(None, description="Files to store for the task"),
    handler: UploadHandler = Depends(get_upload_handler),
):
    """
    Store uploaded files for a task.

    Files whose name is already stored for the task are skipped. When every
    file is skipped the response carries `status: "exist"` instead of a count.
    """
    # parts sent without a filename are empty file inputs, not files
    incoming = [await _read_upload(f) for f in files or [] if f.filename]

    result = await run_in_threadpool(handler.upload, task_id, incoming)

    if result.already_exists:
        return FilesExistResponse(message="Files already exist for this task")
    return UploadFilesResponse(message="Files uploaded successfully", new_files=result.new_files)


@router.get(
    "/uploadfiles/{taskId}",
    response_model=GetFilesResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_files(
    task_id: str = Path(..., alias="taskId", description="Task whose files to return"),
    handler: RetrievalHandler = Depends(get_retrieval_handler),
) -> GetFilesResponse:
    """Return every file stored for a task, payloads base64-encoded."""
    records = await run_in_threadpool(handler.retrieve, task_id)
    return GetFilesResponse(files=records)
