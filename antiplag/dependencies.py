"""
Dependency providers for the API.

Each provider builds its component once from settings. Tests replace them
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from antiplag.config import settings
from antiplag.database import get_session_factory
from antiplag.plagiarism.analyzer import AnalysisService
from antiplag.plagiarism.comparator import SimilarityConfig
from antiplag.plagiarism.crud import ReportStore
from antiplag.s3_storage import S3Storage
from antiplag.storing.analysis_client import AnalysisClient
from antiplag.storing.crud import TaskStore
from antiplag.storing.service import StoringService
from antiplag.worker.watcher import WatchPolicy
from antiplag.worker.worker import UploadWatcherPool


@lru_cache()
def get_storage() -> S3Storage:
    return S3Storage(base_path=settings.storage_path, bucket_name=settings.storage_bucket)


@lru_cache()
def get_analysis_service() -> AnalysisService:
    return AnalysisService(
        storage=get_storage(),
        reports=ReportStore(get_session_factory()),
        config=SimilarityConfig.from_settings(settings),
    )


@lru_cache()
def get_analysis_client() -> AnalysisClient:
    return AnalysisClient(
        base_url=settings.analysis_service_url,
        timeout=settings.analysis_call_timeout,
    )


@lru_cache()
def get_watcher_pool() -> UploadWatcherPool:
    return UploadWatcherPool(
        object_exists=get_storage().stat_object,
        analyse=get_analysis_client().analyse_task,
        policy=WatchPolicy.from_settings(settings),
        max_workers=settings.watcher_concurrency,
    )


@lru_cache()
def get_storing_service() -> StoringService:
    return StoringService(
        tasks=TaskStore(get_session_factory()),
        storage=get_storage(),
        watchers=get_watcher_pool(),
        public_base_url=settings.public_base_url,
    )


def close_resources() -> None:
    """Stop background watchers and release clients created by the providers."""
    if get_watcher_pool.cache_info().currsize:
        get_watcher_pool().shutdown(wait=False)
    if get_analysis_client.cache_info().currsize:
        get_analysis_client().close()
    for provider in (get_storing_service, get_watcher_pool, get_analysis_client, get_analysis_service, get_storage):
        provider.cache_clear()
