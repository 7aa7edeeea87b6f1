import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from antiplag.exceptions import AlreadyExistsError, NotFoundError, UnavailableError
from antiplag.models.domain import Report
from antiplag.models.models import PlagiarismReport

log = logging.getLogger(__name__)


def _to_report(row: PlagiarismReport) -> Report:
    return Report(
        task_id=row.task_id,
        is_plagiarism=row.is_plagiarism,
        plagiarism_percentage=row.plagiarism_percentage,
        created_at=row.created_at,
    )


class ReportStore:
    """Durable task id -> verdict mapping. Reports are insert-only, one per task."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_report(
        self,
        task_id: UUID,
        is_plagiarism: bool,
        plagiarism_percentage: float,
        created_at: datetime,
    ) -> Report:
        session = self._session_factory()
        row = PlagiarismReport(
            task_id=task_id,
            is_plagiarism=is_plagiarism,
            plagiarism_percentage=plagiarism_percentage,
            created_at=created_at,
        )
        session.add(row)
        try:
            session.commit()
            log.debug(f"[Task {task_id}] Report stored: plagiarism={is_plagiarism} percentage={plagiarism_percentage:.2f}")
            return _to_report(row)
        except IntegrityError:
            # Another analysis stored a report for this task concurrently
            session.rollback()
            raise AlreadyExistsError(f"report for task {task_id} already exists")
        except SQLAlchemyError as e:
            session.rollback()
            raise UnavailableError(f"failed to store report for task {task_id}: {e}")
        finally:
            session.close()

    def get_report(self, task_id: UUID) -> Report:
        session = self._session_factory()
        try:
            row = session.execute(
                select(PlagiarismReport).where(PlagiarismReport.task_id == task_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise UnavailableError(f"failed to load report for task {task_id}: {e}")
        finally:
            session.close()

        if row is None:
            raise NotFoundError(f"report for task {task_id} not found")
        return _to_report(row)

    def report_exists(self, task_id: UUID) -> bool:
        session = self._session_factory()
        try:
            return session.execute(
                select(exists().where(PlagiarismReport.task_id == task_id))
            ).scalar()
        except SQLAlchemyError as e:
            raise UnavailableError(f"failed to check report for task {task_id}: {e}")
        finally:
            session.close()
