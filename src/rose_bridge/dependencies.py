"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from rose_bridge.services.ingestion import WebhookIngestionController


def get_controller(request: Request) -> WebhookIngestionController:
    """Return the ingestion controller built during app startup."""
    return request.app.state.controller


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


# Type aliases for dependency injection
Controller = Annotated[WebhookIngestionController, Depends(get_controller)]
TraceId = Annotated[str, Depends(get_trace_id)]
