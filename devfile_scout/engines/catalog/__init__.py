"""Devfile registry (catalog) lookups."""

from devfile_scout.engines.catalog.base import DevfileCatalog
from devfile_scout.engines.catalog.client import RegistryClient
from devfile_scout.engines.catalog.models import SampleIndexEntry

__all__ = ["DevfileCatalog", "RegistryClient", "SampleIndexEntry"]
