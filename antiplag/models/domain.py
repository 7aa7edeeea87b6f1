from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Report:
    task_id: UUID
    is_plagiarism: bool
    plagiarism_percentage: float
    created_at: datetime


@dataclass(frozen=True)
class Task:
    id: UUID
    filename: str
    uploaded_by: UUID
    object_key: str
    created_at: datetime
