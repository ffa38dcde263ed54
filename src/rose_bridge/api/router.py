"""Master API router, mounted at the root so provider-facing paths stay stable."""

from fastapi import APIRouter

from rose_bridge.api.routes import health, webhooks

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(webhooks.router)
