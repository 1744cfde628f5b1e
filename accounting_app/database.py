import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine as sa_create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError
from sqlmodel import SQLModel, Session, create_engine

from .config import Settings, settings as default_settings


logger = logging.getLogger(__name__)

# Postgres SQLSTATE for "database already exists"
DUPLICATE_DATABASE = "42P04"


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 60},
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
    )


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session


def init_db(engine: Engine) -> None:
    from .models import user, expense, category  # noqa: F401

    SQLModel.metadata.create_all(engine)


def _sqlstate(exc: DBAPIError) -> Optional[str]:
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def create_database(config: Optional[Settings] = None) -> bool:
    """Create the application database on the configured Postgres server.

    Connects to the ``postgres`` maintenance database, so the target database
    does not need to exist yet. Returns ``False`` when it already did.
    """
    config = config or default_settings
    url = make_url(config.database_url)
    name = url.database or config.database_name

    engine = sa_create_engine(
        url.set(database="postgres"),
        isolation_level="AUTOCOMMIT",
    )
    try:
        with engine.connect() as conn:
            conn.execute(text(f'CREATE DATABASE "{name}"'))
        logger.info("Created database %s", name)
        return True
    except DBAPIError as exc:
        if _sqlstate(exc) == DUPLICATE_DATABASE:
            logger.info("Database %s already exists", name)
            return False
        logger.error("Error creating database %s: %s", name, exc)
        raise
    finally:
        engine.dispose()
