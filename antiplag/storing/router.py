import logging
import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from antiplag.dependencies import get_storage, get_storing_service
from antiplag.exceptions import InvalidArgumentError
from antiplag.models.domain import Task
from antiplag.s3_storage import S3Storage
from antiplag.storing.schemes import (
    StoredObjectResponse,
    TaskResponse,
    UploadTaskRequest,
    UploadTaskResponse,
)
from antiplag.storing.service import StoringService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/storing", tags=["Storing"])


def parse_uuid(value: str, field: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        log.warning(f"Invalid {field} UUID: {value!r}")
        raise InvalidArgumentError(f"invalid {field}: {value!r} is not a UUID")


def _task_response(task: Task, url: str) -> TaskResponse:
    return TaskResponse(
        task_id=str(task.id),
        filename=task.filename,
        object_key=task.object_key,
        url=url,
        uploaded_by=str(task.uploaded_by),
        created_at=task.created_at,
    )


@router.post("/tasks", response_model=UploadTaskResponse)
def upload_task(
    request: UploadTaskRequest,
    service: StoringService = Depends(get_storing_service),
):
    uploaded_by = parse_uuid(request.uploaded_by, "uploaded_by")
    task, upload_url = service.upload_task(request.filename, uploaded_by)
    return UploadTaskResponse(
        task_id=str(task.id),
        object_key=task.object_key,
        upload_url=upload_url,
    )


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    service: StoringService = Depends(get_storing_service),
):
    task, url = service.get_task(parse_uuid(task_id, "task_id"))
    return _task_response(task, url)


@router.get("/tasks/{task_id}/content")
def get_file_content(
    task_id: str,
    service: StoringService = Depends(get_storing_service),
):
    content = service.get_file_content(parse_uuid(task_id, "task_id"))
    return Response(content=content, media_type="application/octet-stream")


@router.put("/objects/{object_key:path}", response_model=StoredObjectResponse)
async def put_object(
    object_key: str,
    request: Request,
    storage: S3Storage = Depends(get_storage),
):
    """Write URL handed out by upload registration."""
    data = await request.body()
    stored = await run_in_threadpool(storage.put_object, object_key, data)
    log.info(f"Uploaded {object_key} ({stored['size']} bytes)")
    return StoredObjectResponse(**stored)


@router.get("/objects/{object_key:path}")
async def get_object(
    object_key: str,
    storage: S3Storage = Depends(get_storage),
):
    content = await run_in_threadpool(storage.get_object, object_key)
    return Response(content=content, media_type="application/octet-stream")
