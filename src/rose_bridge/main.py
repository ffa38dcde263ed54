"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rose_bridge import __version__
from rose_bridge.chain.provenance import ProvenanceVerifier
from rose_bridge.config import Settings, resolve_marketplace_address
from rose_bridge.github.client import GitHubClient
from rose_bridge.logging_config import configure_logging
from rose_bridge.services.ingestion import WebhookIngestionController
from rose_bridge.services.merge_orchestrator import MergeOrchestrator

logger = logging.getLogger(__name__)


def _log_startup_banner(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    verifier: ProvenanceVerifier = app.state.controller.verifier

    logger.info("Rose Token merge bridge listening on port %d", settings.port)
    if verifier.enabled:
        logger.info(
            "Marketplace address: %s (contract address verification ENABLED)",
            verifier.expected_address,
        )
    else:
        logger.warning(
            "Marketplace address NOT CONFIGURED - accepting events from ANY contract. "
            "Set MARKETPLACE_ADDRESS to enable verification"
        )
    if not app.state.github.configured:
        logger.warning("GITHUB_TOKEN not set - merge calls will be unauthenticated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the provenance configuration on startup; close the GitHub client on shutdown."""
    _log_startup_banner(app)
    yield
    await app.state.github.aclose()
    logger.info("Rose Token merge bridge shutdown complete")


def create_app(settings: Settings | None = None, github: GitHubClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The verifier, orchestrator and controller are wired here, not at import
    time, so each app instance carries its own configuration.
    """
    settings = settings or Settings()
    if github is None:
        github = GitHubClient(
            settings.github_token,
            base_url=settings.github_api_url,
            timeout=settings.github_timeout_seconds,
            max_concurrency=settings.github_max_concurrency,
        )

    verifier = ProvenanceVerifier(resolve_marketplace_address(settings))
    orchestrator = MergeOrchestrator(github, merge_method=settings.merge_method)

    app = FastAPI(
        title="Rose Token Merge Bridge",
        version=__version__,
        description="Merges worker pull requests when the marketplace contract emits TaskApproved.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.github = github
    app.state.controller = WebhookIngestionController(verifier, orchestrator)

    from rose_bridge.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from rose_bridge.api.router import api_router
    app.include_router(api_router)

    return app


_settings = Settings()
# Configure logging at import time
configure_logging(log_level=_settings.log_level, json_output=_settings.json_logs)

app = create_app(_settings)
