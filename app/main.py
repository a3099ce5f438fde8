from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.provider import build_default_provider


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    provider = build_default_provider()
    try:
        yield
    finally:
        provider.cache.clear()
        build_default_provider.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="GHCN Daily Provider",
        description="Read-only aggregation and proximity queries over local GHCN-Daily station files.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()
