"""Async devfile registry client with retries."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from devfile_scout.config import DEFAULT_HTTP_TIMEOUT
from devfile_scout.engines.catalog.models import SampleIndexEntry
from devfile_scout.engines.classifier.base import DevfileType
from devfile_scout.exceptions import CatalogLookupError

log = structlog.get_logger("devfile_scout.engine")

_SAMPLE_INDEX_PATH = "/index/sample"

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds


class RegistryClient:
    """Thin async wrapper around the devfile registry REST API."""

    def __init__(
        self,
        registry_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.registry_url = registry_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.registry_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_sample_index(self) -> list[SampleIndexEntry]:
        """Fetch and validate the registry's sample index."""
        data = await self._get_json(_SAMPLE_INDEX_PATH)
        if not isinstance(data, list):
            raise CatalogLookupError(
                f"unexpected sample index payload from {self.registry_url}: {type(data).__name__}"
            )
        try:
            return [SampleIndexEntry.model_validate(item) for item in data]
        except ValidationError as exc:
            raise CatalogLookupError(
                f"invalid sample index from {self.registry_url}: {exc}"
            ) from exc

    async def get_devfile_types(self) -> list[DevfileType]:
        """Candidate devfile types, in registry (priority) order."""
        return [
            DevfileType(
                name=entry.name,
                language=entry.language,
                project_type=entry.project_type,
                tags=list(entry.tags),
            )
            for entry in await self.get_sample_index()
        ]

    async def resolve_sample_repository(self, sample_name: str) -> str:
        """Return the git repository URL backing *sample_name*."""
        for entry in await self.get_sample_index():
            if entry.name != sample_name:
                continue
            repo_url = entry.repository_url()
            if repo_url is None:
                raise CatalogLookupError(
                    f"sample {sample_name!r} in {self.registry_url} has no git remotes"
                )
            return repo_url
        raise CatalogLookupError(f"sample {sample_name!r} not found in {self.registry_url}")

    # ── internal ───────────────────────────────────────────────────────────

    async def _get_json(self, path: str) -> Any:
        response = await self._request_with_retry(path)
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogLookupError(
                f"registry {self.registry_url} returned invalid JSON for {path}"
            ) from exc

    async def _request_with_retry(self, path: str) -> httpx.Response:
        """GET with exponential backoff on 5xx and timeout errors."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                resp = await self._client.get(path)
                if resp.status_code < 500:
                    resp.raise_for_status()
                    return resp

                log.warning(
                    "registry.server_error",
                    url=f"{self.registry_url}{path}",
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = httpx.HTTPStatusError(
                    f"{resp.status_code}", request=resp.request, response=resp
                )
            except httpx.TimeoutException as exc:
                log.warning(
                    "registry.timeout",
                    url=f"{self.registry_url}{path}",
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = exc
            except httpx.HTTPStatusError as exc:
                raise CatalogLookupError(
                    f"registry {self.registry_url} returned {exc.response.status_code} for {path}"
                ) from exc
            except httpx.HTTPError as exc:
                raise CatalogLookupError(
                    f"registry {self.registry_url} is unreachable: {exc}"
                ) from exc

            if attempt < _MAX_RETRIES - 1:
                delay = _RETRY_BASE_DELAY * (2**attempt)
                await asyncio.sleep(delay)

        raise CatalogLookupError(
            f"registry {self.registry_url} failed after {_MAX_RETRIES} attempts: {last_exc}"
        ) from last_exc
