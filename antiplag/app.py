import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from antiplag import __version__
from antiplag.config import settings
from antiplag.database import init_db
from antiplag.dependencies import close_resources, get_watcher_pool
from antiplag.exceptions.error_handler import add_exception_handler
from antiplag.plagiarism.router import router as router_analysis
from antiplag.storing.router import router as router_storing
from antiplag.worker.worker import configure_logging

log = logging.getLogger(__name__)

app = FastAPI(title="Plagiarism Analysis API", version=__version__)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router_analysis)
app.include_router(router_storing)

add_exception_handler(app)


@app.on_event("startup")
def on_startup():
    configure_logging(level=logging.getLevelName(settings.log_level))
    init_db()
    get_watcher_pool()
    log.info(f"Plagiarism Analysis API started ({settings.environment})")


@app.on_event("shutdown")
def on_shutdown():
    close_resources()


@app.get("/health")
def health():
    return {"status": "ok"}
