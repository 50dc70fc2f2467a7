"""
Dashboard FastAPI application factory.

Exposes the file sink's state as JSON for operators and health probes.

Usage::

    from logsink.dashboard.app import create_app
    app = create_app(sink, router)
"""

from __future__ import annotations

from fastapi import FastAPI

from logsink.dashboard.routes import build_router


def create_app(sink=None, router=None) -> FastAPI:
    """
    Create and configure the FastAPI dashboard app.

    Parameters are optional — when None, endpoints return empty/default data.

    Parameters
    ----------
    sink : FileSink
        Sink whose stats are reported.
    router : MessageRouter
        Router whose counters are reported.
    """
    app = FastAPI(
        title="Log Sink Dashboard",
        description="File sink state, rotation and drop counters",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url=None,
    )
    app.include_router(build_router(sink=sink, router=router), prefix="/api")
    return app
