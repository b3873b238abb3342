"""devfile-scout: devfile and Dockerfile discovery for multi-component repositories."""

__version__ = "0.1.0"

from devfile_scout.engines.discovery import (
    BuildFileRecord,
    ManifestRecord,
    PortSet,
    ScanRequest,
    ScanResult,
    scan,
    scan_repository,
)
from devfile_scout.exceptions import (
    CatalogLookupError,
    InvalidDevfileError,
    InvalidSourceURLError,
    NoDevfileFoundError,
    ScanError,
    ScanIOError,
)

__all__ = [
    "BuildFileRecord",
    "CatalogLookupError",
    "InvalidDevfileError",
    "InvalidSourceURLError",
    "ManifestRecord",
    "NoDevfileFoundError",
    "PortSet",
    "ScanError",
    "ScanIOError",
    "ScanRequest",
    "ScanResult",
    "scan",
    "scan_repository",
]
