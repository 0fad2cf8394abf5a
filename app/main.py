from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.feed import build_default_feed


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    feed = build_default_feed()
    try:
        yield
    finally:
        feed.reset()
        build_default_feed.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Realtime Sensor Feed",
        description="Replays historical temperature and power readings as a live feed.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
