"""Discovery engine - per-component devfile and Dockerfile resolution."""

from devfile_scout.engines.discovery.models import (
    BuildFileRecord,
    ManifestRecord,
    PortSet,
    ScanRequest,
    ScanResult,
)
from devfile_scout.engines.discovery.resolver import ContextResolver, DetectedDevfile
from devfile_scout.engines.discovery.scanner import inspect_context, scan, scan_repository

__all__ = [
    "BuildFileRecord",
    "ContextResolver",
    "DetectedDevfile",
    "ManifestRecord",
    "PortSet",
    "ScanRequest",
    "ScanResult",
    "inspect_context",
    "scan",
    "scan_repository",
]
