"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from rose_bridge import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Return service status and whether provenance checking is active."""
    controller = request.app.state.controller
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "rose-bridge",
        "version": __version__,
        "provenance_check": controller.verifier.enabled,
        "github_configured": controller.orchestrator.github.configured,
    }
