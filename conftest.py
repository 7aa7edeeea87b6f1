"""
Shared fixtures: a throwaway SQLite database, a temporary bucket and a fake clock.
"""

import threading
from typing import List, Optional

import pytest

from antiplag.database import init_db, make_engine
from antiplag.plagiarism.crud import ReportStore
from antiplag.s3_storage import S3Storage
from antiplag.storing.crud import TaskStore
from sqlalchemy.orm import sessionmaker


class FakeClock:
    """Clock that only advances when the watcher sleeps."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float, interrupt: Optional[threading.Event] = None) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'antiplag.db'}")
    init_db(engine)
    yield sessionmaker(engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def report_store(session_factory) -> ReportStore:
    return ReportStore(session_factory)


@pytest.fixture
def task_store(session_factory) -> TaskStore:
    return TaskStore(session_factory)


@pytest.fixture
def storage(tmp_path) -> S3Storage:
    return S3Storage(base_path=str(tmp_path / "s3"), bucket_name="tasks")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
