"""Data models for the discovery engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from devfile_scout.config import DEFAULT_REGISTRY_URL


@dataclass(frozen=True)
class ScanRequest:
    """Everything one scan needs to know about the repository."""

    root_path: str
    repo_url: str
    registry_url: str = DEFAULT_REGISTRY_URL
    context_prefix: str = "./"
    revision: str | None = None
    token: str | None = None


@dataclass(frozen=True)
class ManifestRecord:
    """The devfile chosen for one context."""

    context: str
    raw_bytes: bytes | None
    url: str | None


@dataclass(frozen=True)
class BuildFileRecord:
    """The Dockerfile/Containerfile chosen for one context.

    *location* is a path relative to the context, or an absolute URL.
    """

    context: str
    location: str

    @property
    def is_url(self) -> bool:
        return self.location.startswith(("http://", "https://"))


@dataclass(frozen=True)
class PortSet:
    context: str
    ports: frozenset[int]


@dataclass
class ScanResult:
    """Per-context outcome of a scan, keyed by context path.

    A context may be missing from any of the maps.  A context absent from
    ``ports`` means the ports are unknown, not that there are none.
    """

    devfiles: dict[str, bytes] = field(default_factory=dict)
    devfile_urls: dict[str, str] = field(default_factory=dict)
    dockerfiles: dict[str, str] = field(default_factory=dict)
    ports: dict[str, list[int]] = field(default_factory=dict)

    def set_ports(self, context: str, ports: list[int] | None) -> None:
        """Record *ports* for *context*; empty or missing lists are not recorded."""
        if ports:
            self.ports[context] = sorted(set(ports))

    def is_empty(self) -> bool:
        return not self.devfiles and not self.devfile_urls and not self.dockerfiles

    def contexts(self) -> list[str]:
        keys = set(self.devfiles) | set(self.devfile_urls) | set(self.dockerfiles) | set(self.ports)
        return sorted(keys)

    def manifest_records(self) -> list[ManifestRecord]:
        return [
            ManifestRecord(
                context=context,
                raw_bytes=self.devfiles.get(context),
                url=self.devfile_urls.get(context),
            )
            for context in sorted(set(self.devfiles) | set(self.devfile_urls))
        ]

    def build_file_records(self) -> list[BuildFileRecord]:
        return [
            BuildFileRecord(context=context, location=location)
            for context, location in sorted(self.dockerfiles.items())
        ]

    def port_sets(self) -> list[PortSet]:
        return [
            PortSet(context=context, ports=frozenset(ports))
            for context, ports in sorted(self.ports.items())
        ]

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; devfile bytes are decoded as UTF-8 text."""
        return {
            "devfiles": {
                k: v.decode("utf-8", errors="replace") for k, v in sorted(self.devfiles.items())
            },
            "devfile_urls": dict(sorted(self.devfile_urls.items())),
            "dockerfiles": dict(sorted(self.dockerfiles.items())),
            "ports": {k: list(v) for k, v in sorted(self.ports.items())},
        }
