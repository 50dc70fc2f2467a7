"""
Dashboard API routes.

All endpoints return JSON.

Endpoints
---------
GET /api/status   — Sink state and counters, router counters
GET /api/health   — Coarse health verdict for probes
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter


def build_router(sink=None, router=None) -> APIRouter:
    """Build and return an APIRouter with all dashboard endpoints."""

    api = APIRouter()

    # ------------------------------------------------------------------
    # GET /api/status
    # ------------------------------------------------------------------

    @api.get("/status", summary="Sink state and counters")
    async def get_status() -> Dict[str, Any]:
        """
        Returns the sink snapshot and router counters.

        Fields:
        - sink: SinkStats.to_dict() or null
        - router: routed / filtered / dropped counts or null
        - min_level: router minimum level or null
        - timestamp: ISO UTC
        """
        payload: Dict[str, Any] = {
            "sink": None,
            "router": None,
            "min_level": None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if sink is not None:
            payload["sink"] = sink.stats().to_dict()
        if router is not None:
            payload["router"] = router.counters()
            payload["min_level"] = router.min_severity.value
        return payload

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @api.get("/health", summary="Sink health verdict")
    async def get_health() -> Dict[str, Any]:
        """
        ``healthy`` when the sink has never failed to open or rotate and its
        directory exists, ``degraded`` otherwise, ``unknown`` without a sink.
        """
        if sink is None:
            return {"status": "unknown"}

        stats = sink.stats()
        degraded = (
            stats.open_failures > 0
            or stats.failed_rotations > 0
            or not stats.directory_ready
        )
        return {
            "status": "degraded" if degraded else "healthy",
            "opened": stats.opened,
            "directory_ready": stats.directory_ready,
            "open_failures": stats.open_failures,
            "failed_rotations": stats.failed_rotations,
        }

    return api
