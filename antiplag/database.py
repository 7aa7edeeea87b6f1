from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from antiplag.config import settings

Base = declarative_base()


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


@lru_cache()
def get_engine() -> Engine:
    return make_engine(settings.db_sync_url)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(get_engine(), expire_on_commit=False)


def init_db(engine: Engine = None) -> None:
    """Create missing tables. Migrations under database/migration own the schema in production."""
    # models must be imported so their tables are registered on Base.metadata
    from antiplag.models import models  # noqa: F401

    Base.metadata.create_all(engine or get_engine())
