import logging

from fastapi import FastAPI
from starlette.responses import JSONResponse

from antiplag.exceptions.exceptions import PlagiarismServiceError

log = logging.getLogger(__name__)


def add_exception_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request, err):
        log.error(f"Unhandled error on {request.method} {request.url.path}: {type(err).__name__}: {err}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "code": "INTERNAL",
                "error_details": f"{type(err).__name__}: {str(err)}",
            },
        )

    @app.exception_handler(PlagiarismServiceError)
    async def service_exception_handler(request, err: PlagiarismServiceError):
        return JSONResponse(
            status_code=err.status_code,
            content={
                "status": "error",
                "code": err.code,
                "error_details": str(err),
            },
        )
