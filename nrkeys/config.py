"""
Centralized configuration for nrkeys.

Configuration is loaded from environment variables with sensible defaults,
then CLI flags are layered on top with Config.with_overrides(). The resulting
frozen Config is handed to NerdGraphClient explicitly.

Usage:
    from nrkeys.config import get_config
    cfg = get_config()
    print(cfg.endpoint)      # "https://api.newrelic.com/graphql"
    print(cfg.masked_key)    # "****ABCD"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.newrelic.com/graphql"
DEFAULT_TIMEOUT = 30.0

REGION_ENDPOINTS: dict[str, str] = {
    "us": DEFAULT_ENDPOINT,
    "eu": "https://api.eu.newrelic.com/graphql",
}

OUTPUT_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Config:
    """Connection and presentation settings for one CLI invocation."""

    api_key: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    region: str = "us"
    timeout: float = DEFAULT_TIMEOUT  # seconds, per request
    format: str = "json"
    verbose: bool = False
    # Set when the endpoint came from NEW_RELIC_API_ENDPOINT or --endpoint
    endpoint_explicit: bool = False

    @property
    def masked_key(self) -> str:
        """API key with everything but the last 4 characters hidden."""
        if not self.api_key:
            return "<unset>"
        return "****" + self.api_key[-4:]

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with non-None overrides applied.

        A region override also moves the endpoint, unless an explicit
        endpoint is given in the same call or was already set explicitly.
        """
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in known}
        if "endpoint" in changes:
            changes["endpoint_explicit"] = True
        elif "region" in changes and not self.endpoint_explicit:
            changes["endpoint"] = endpoint_for_region(changes["region"])
        return replace(self, **changes)


def endpoint_for_region(region: str) -> str:
    try:
        return REGION_ENDPOINTS[region.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown region {region!r} (expected one of: {', '.join(REGION_ENDPOINTS)})"
        ) from None


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    region = os.environ.get("NEW_RELIC_REGION", "us").lower()
    explicit_endpoint = os.environ.get("NEW_RELIC_API_ENDPOINT")

    return Config(
        api_key=os.environ.get("NEW_RELIC_API_KEY", ""),
        endpoint=explicit_endpoint or endpoint_for_region(region),
        endpoint_explicit=bool(explicit_endpoint),
        region=region,
        timeout=_timeout_from_env(),
    )


def _timeout_from_env() -> float:
    raw = os.environ.get("NEW_RELIC_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid NEW_RELIC_TIMEOUT=%r, using %.0fs", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning("Ignoring non-positive NEW_RELIC_TIMEOUT=%r, using %.0fs", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return value


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
