from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.session import build_default_session


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    session = build_default_session()
    try:
        yield
    finally:
        session.stop()
        build_default_session.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Fill Level Monitor",
        description="Outlier-resistant fill level and consumption estimates per tracked bottle.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
