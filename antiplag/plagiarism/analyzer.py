import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from antiplag.exceptions import AlreadyExistsError
from antiplag.models.domain import Report
from antiplag.plagiarism.comparator import SimilarityConfig, TextComparator
from antiplag.plagiarism.crud import ReportStore
from antiplag.s3_storage import S3Storage

log = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CorpusScanner:
    """Scores a target document against every other object in the bucket."""

    def __init__(self, storage: S3Storage, comparator: TextComparator):
        self.storage = storage
        self.comparator = comparator

    def scan(self, target_key: str, target_bytes: bytes) -> float:
        """
        Return the highest similarity between the target and any other document.

        Listing failures propagate. A candidate that cannot be fetched or
        compared is logged and skipped, so one unreadable document never
        aborts the scan.
        """
        all_keys = self.storage.list_keys()
        candidate_keys = [key for key in all_keys if key != target_key]
        log.debug(f"Scanning {len(candidate_keys)} candidates for {target_key} ({len(all_keys)} keys total)")

        max_score = 0.0
        compared = 0
        for index, key in enumerate(candidate_keys, start=1):
            try:
                candidate_bytes = self.storage.get_object(key)
                score = self.comparator.compare(target_bytes, candidate_bytes)
            except Exception as e:
                log.warning(f"Skipping candidate {key} ({index}/{len(candidate_keys)}): {e}")
                continue

            compared += 1
            log.debug(f"  {target_key} vs {key}: {score:.2f}%")
            if score > max_score:
                max_score = score

        log.debug(f"Compared {compared}/{len(candidate_keys)} candidates for {target_key}, max={max_score:.2f}%")
        return max_score


class AnalysisService:
    """Runs the corpus scan for a task, classifies it and stores the report."""

    def __init__(
        self,
        storage: S3Storage,
        reports: ReportStore,
        config: SimilarityConfig = SimilarityConfig(),
        scanner: Optional[CorpusScanner] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.reports = reports
        self.config = config
        self.scanner = scanner or CorpusScanner(storage, TextComparator(config))
        self._now = clock

    def is_plagiarism(self, score: float) -> bool:
        return score >= self.config.plagiarism_threshold

    def analyze(self, task_id: UUID, object_key: str) -> bool:
        log.info(f"[Task {task_id}] Start analysis of {object_key}")

        if self.reports.report_exists(task_id):
            log.warning(f"[Task {task_id}] Report already exists, refusing duplicate analysis")
            raise AlreadyExistsError(f"report for task {task_id} already exists")

        target_bytes = self.storage.get_object(object_key)
        log.debug(f"[Task {task_id}] Target {object_key} fetched ({len(target_bytes)} bytes)")

        max_score = self.scanner.scan(object_key, target_bytes)
        is_plagiarism = self.is_plagiarism(max_score)
        log.info(
            f"[Task {task_id}] Analysis completed: max={max_score:.2f}% "
            f"plagiarism={is_plagiarism} threshold={self.config.plagiarism_threshold}"
        )

        self.reports.create_report(
            task_id=task_id,
            is_plagiarism=is_plagiarism,
            plagiarism_percentage=max_score,
            created_at=self._now(),
        )
        log.info(f"[Task {task_id}] Report saved")
        return True

    def get_report(self, task_id: UUID) -> Report:
        report = self.reports.get_report(task_id)
        log.info(
            f"[Task {task_id}] Report retrieved: plagiarism={report.is_plagiarism} "
            f"percentage={report.plagiarism_percentage:.2f}"
        )
        return report
