import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, settings as default_settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .database import build_engine, init_db
from .routers import categories as categories_router
from .routers import expenses as expenses_router
from .routers import users as users_router


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            init_db(app.state.engine)
        except SQLAlchemyError:
            logger.exception("Unable to connect to the database")
            if not settings.is_test:
                raise
        yield
        app.state.engine.dispose()

    app = FastAPI(title="Accounting App", version="0.1.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(users_router.router)
    app.include_router(expenses_router.router)
    app.include_router(categories_router.router)

    # Mounted last so it never shadows the API routes
    if settings.static_dir and Path(settings.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
