"""Application configuration via environment variables."""

import json
import logging
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from rose_bridge.models.enums import MergeMethod

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Marketplace provenance (explicit override; falls back to the deployment artifact)
    marketplace_address: str | None = Field(
        None,
        validation_alias=AliasChoices("ROSE_BRIDGE_MARKETPLACE_ADDRESS", "MARKETPLACE_ADDRESS"),
    )
    deployment_file: str = "deployment-output.json"

    # GitHub
    github_token: str = Field(
        "",
        validation_alias=AliasChoices("ROSE_BRIDGE_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: float = 10.0
    github_max_concurrency: int = Field(4, ge=1)
    merge_method: MergeMethod = MergeMethod.MERGE

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    json_logs: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ROSE_BRIDGE_",
        "extra": "ignore",
        "populate_by_name": True,
    }


def _read_deployment_address(path: Path) -> str | None:
    """Return ``roseMarketplace`` from a deployment artifact, if present."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None

    address = data.get("roseMarketplace") if isinstance(data, dict) else None
    if not isinstance(address, str) or not address.strip():
        return None
    logger.info("Loaded marketplace address from %s", path)
    return address


def resolve_marketplace_address(settings: Settings) -> str | None:
    """Resolve the expected marketplace contract address, lowercased.

    Priority: explicit setting, then the deployment artifact. ``None`` means
    provenance checking is disabled.
    """
    if settings.marketplace_address and settings.marketplace_address.strip():
        return settings.marketplace_address.strip().lower()

    address = _read_deployment_address(Path(settings.deployment_file))
    return address.strip().lower() if address else None
