from datetime import datetime

from pydantic import BaseModel, Field


class AnalyseTaskRequest(BaseModel):
    object_key: str = Field(min_length=1)


class AnalyseTaskResponse(BaseModel):
    status: bool


class ReportResponse(BaseModel):
    task_id: str
    is_plagiarism: bool
    plagiarism_percentage: float
    created_at: datetime
