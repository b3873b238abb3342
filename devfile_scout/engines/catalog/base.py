"""Catalog interface consumed by the discovery engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from devfile_scout.engines.classifier.base import DevfileType


@runtime_checkable
class DevfileCatalog(Protocol):
    """Interface that every devfile catalog must satisfy."""

    registry_url: str

    async def get_devfile_types(self) -> list[DevfileType]: ...

    async def resolve_sample_repository(self, sample_name: str) -> str: ...
