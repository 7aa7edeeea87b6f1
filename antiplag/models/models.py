from sqlalchemy import Boolean, Column, DateTime, Float, String, Uuid
from sqlalchemy.sql import func
import uuid

from antiplag.database import Base


class UploadTask(Base):
    __tablename__ = "upload_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    filename = Column(String, nullable=False)
    uploaded_by = Column(Uuid, nullable=False)
    object_key = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PlagiarismReport(Base):
    __tablename__ = "plagiarism_reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # one report per task; concurrent analyses of the same task lose on this constraint
    task_id = Column(Uuid, nullable=False, unique=True, index=True)
    is_plagiarism = Column(Boolean, nullable=False)
    plagiarism_percentage = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
