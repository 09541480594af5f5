from fastapi import FastAPI

from .health import router as health_router
from .index import router as index_router
from .notify import router as notify_router
from .realtime import router as realtime_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(index_router)
    app.include_router(health_router)
    app.include_router(notify_router)
    app.include_router(realtime_router)
