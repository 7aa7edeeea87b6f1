import logging
import posixpath
import uuid
from datetime import datetime
from typing import Callable
from uuid import UUID

from antiplag.exceptions import InvalidArgumentError
from antiplag.models.domain import Task
from antiplag.plagiarism.analyzer import utc_now
from antiplag.s3_storage import S3Storage
from antiplag.storing.crud import TaskStore
from antiplag.worker.worker import UploadWatcherPool

log = logging.getLogger(__name__)


def make_object_key(task_id: UUID, filename: str) -> str:
    """Object key of a task's document: the task id followed by the file extension."""
    extension = posixpath.splitext(filename)[1]
    if not extension[1:].isalnum():
        raise InvalidArgumentError(f"invalid file extension in {filename!r}")
    return f"{task_id}{extension}"


class StoringService:
    """Registers uploads and starts a watcher that triggers analysis once the bytes land."""

    def __init__(
        self,
        tasks: TaskStore,
        storage: S3Storage,
        watchers: UploadWatcherPool,
        public_base_url: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.tasks = tasks
        self.storage = storage
        self.watchers = watchers
        self.public_base_url = public_base_url.rstrip("/")
        self._now = clock

    def object_url(self, object_key: str) -> str:
        return f"{self.public_base_url}/storing/objects/{object_key}"

    def upload_task(self, filename: str, uploaded_by: UUID) -> tuple[Task, str]:
        """
        Register an upload.

        Returns:
            The created task and the URL the client PUTs the document to
        """
        log.info(f"Registering upload of {filename!r} by {uploaded_by}")
        task_id = uuid.uuid4()
        object_key = make_object_key(task_id, filename)

        task = self.tasks.create_task(
            task_id=task_id,
            filename=filename,
            uploaded_by=uploaded_by,
            object_key=object_key,
            created_at=self._now(),
        )

        log.info(f"[Task {task_id}] Starting async analysis watch for {object_key}")
        self.watchers.watch(str(task_id), object_key)
        return task, self.object_url(object_key)

    def get_task(self, task_id: UUID) -> tuple[Task, str]:
        task = self.tasks.get_task(task_id)
        return task, self.object_url(task.object_key)

    def get_file_content(self, task_id: UUID) -> bytes:
        task = self.tasks.get_task(task_id)
        content = self.storage.get_object(task.object_key)
        log.info(f"[Task {task_id}] File content retrieved ({len(content)} bytes)")
        return content
