"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from devfile_scout.exceptions import ConfigError

DEFAULT_REGISTRY_URL = "https://registry.devfile.io"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Settings shared by the CLI and the engine's HTTP clients."""

    registry_url: str = DEFAULT_REGISTRY_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    scan_timeout: float | None = None
    github_token: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment.

        Reads:
            DEVFILE_SCOUT_REGISTRY_URL  - devfile registry (default: registry.devfile.io)
            DEVFILE_SCOUT_HTTP_TIMEOUT  - per-request timeout in seconds (default: 30)
            DEVFILE_SCOUT_SCAN_TIMEOUT  - whole-scan timeout in seconds (default: none)
            GITHUB_TOKEN                - token for private devfiles
        """
        registry_url = os.environ.get("DEVFILE_SCOUT_REGISTRY_URL", DEFAULT_REGISTRY_URL)
        http_timeout = _parse_seconds("DEVFILE_SCOUT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)
        scan_timeout = _parse_seconds("DEVFILE_SCOUT_SCAN_TIMEOUT", None)
        return cls(
            registry_url=registry_url.rstrip("/"),
            http_timeout=http_timeout,  # type: ignore[arg-type]
            scan_timeout=scan_timeout,
            github_token=os.environ.get("GITHUB_TOKEN") or None,
        )


def _parse_seconds(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value
