import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from antiplag.exceptions import AlreadyExistsError, NotFoundError, UnavailableError
from antiplag.models.domain import Task
from antiplag.models.models import UploadTask

log = logging.getLogger(__name__)


def _to_task(row: UploadTask) -> Task:
    return Task(
        id=row.id,
        filename=row.filename,
        uploaded_by=row.uploaded_by,
        object_key=row.object_key,
        created_at=row.created_at,
    )


class TaskStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_task(
        self,
        task_id: UUID,
        filename: str,
        uploaded_by: UUID,
        object_key: str,
        created_at: datetime,
    ) -> Task:
        session = self._session_factory()
        row = UploadTask(
            id=task_id,
            filename=filename,
            uploaded_by=uploaded_by,
            object_key=object_key,
            created_at=created_at,
        )
        session.add(row)
        try:
            session.commit()
            return _to_task(row)
        except IntegrityError:
            session.rollback()
            raise AlreadyExistsError(f"task {task_id} already exists")
        except SQLAlchemyError as e:
            session.rollback()
            raise UnavailableError(f"failed to create task {task_id}: {e}")
        finally:
            session.close()

    def get_task(self, task_id: UUID) -> Task:
        session = self._session_factory()
        try:
            row = session.get(UploadTask, task_id)
        except SQLAlchemyError as e:
            raise UnavailableError(f"failed to load task {task_id}: {e}")
        finally:
            session.close()

        if row is None:
            raise NotFoundError(f"task {task_id} not found")
        return _to_task(row)
