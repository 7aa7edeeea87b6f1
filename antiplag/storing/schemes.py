from datetime import datetime

from pydantic import BaseModel, Field


class UploadTaskRequest(BaseModel):
    filename: str = Field(min_length=1)
    uploaded_by: str


class UploadTaskResponse(BaseModel):
    task_id: str
    object_key: str
    upload_url: str


class TaskResponse(BaseModel):
    task_id: str
    filename: str
    object_key: str
    url: str
    uploaded_by: str
    created_at: datetime


class StoredObjectResponse(BaseModel):
    key: str
    bucket: str
    hash: str
    size: int
