import logging
import uuid

from fastapi import APIRouter, Depends

from antiplag.dependencies import get_analysis_service
from antiplag.exceptions import InvalidArgumentError
from antiplag.plagiarism.analyzer import AnalysisService
from antiplag.plagiarism.schemes import AnalyseTaskRequest, AnalyseTaskResponse, ReportResponse

log = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])


def parse_task_id(task_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(task_id)
    except ValueError:
        log.warning(f"Invalid task_id UUID: {task_id!r}")
        raise InvalidArgumentError(f"invalid task_id: {task_id!r} is not a UUID")


@router.post("/tasks/{task_id}/analyse", response_model=AnalyseTaskResponse)
def analyse_task(
    request: AnalyseTaskRequest,
    # a malformed id fails with 400 before the body is validated
    task_id: uuid.UUID = Depends(parse_task_id),
    service: AnalysisService = Depends(get_analysis_service),
):
    status = service.analyze(task_id, request.object_key)
    return AnalyseTaskResponse(status=status)


@router.get("/reports/{task_id}", response_model=ReportResponse)
def get_report(
    task_id: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    report = service.get_report(parse_task_id(task_id))
    return ReportResponse(
        task_id=str(report.task_id),
        is_plagiarism=report.is_plagiarism,
        plagiarism_percentage=report.plagiarism_percentage,
        created_at=report.created_at,
    )
