"""Devfile parsing - PyYAML loader plus structural checks."""

from __future__ import annotations

import re
from typing import Any, Protocol, runtime_checkable

import httpx
import structlog
import yaml

from devfile_scout.config import DEFAULT_HTTP_TIMEOUT
from devfile_scout.engines.devfile.model import DevfileModel
from devfile_scout.exceptions import InvalidDevfileError

log = structlog.get_logger("devfile_scout.engine")

_SCHEMA_VERSION_RE = re.compile(r"^2\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?$")


@runtime_checkable
class DevfileParser(Protocol):
    """Interface that every devfile parser must satisfy."""

    async def parse(
        self,
        *,
        data: bytes | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> DevfileModel: ...

    def marshal(self, model: DevfileModel) -> bytes: ...


class YamlDevfileParser:
    """Parse devfiles from bytes or from a URL.

    *token* is sent as ``Authorization: token <token>`` when fetching, so
    devfiles in private GitHub repositories can be read.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def parse(
        self,
        *,
        data: bytes | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> DevfileModel:
        if data is None and url is None:
            raise ValueError("either data or url is required")
        location = url or "<bytes>"
        if data is None:
            data = await self._fetch(url, token)  # type: ignore[arg-type]
        return self.load(data, location)

    def load(self, data: bytes, location: str = "<bytes>") -> DevfileModel:
        """Parse and structurally check devfile *data* (no I/O)."""
        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise InvalidDevfileError(location, f"invalid YAML: {exc}") from exc
        _check_document(document, location)
        return DevfileModel(document)

    def marshal(self, model: DevfileModel) -> bytes:
        return yaml.safe_dump(
            model.to_dict(), sort_keys=True, default_flow_style=False, allow_unicode=True
        ).encode("utf-8")

    async def _fetch(self, url: str, token: str | None) -> bytes:
        headers = {"Authorization": f"token {token}"} if token else {}
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport, follow_redirects=True
        ) as client:
            try:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise InvalidDevfileError(
                    url, f"fetch failed with status {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise InvalidDevfileError(url, f"fetch failed: {exc}") from exc
        log.debug("devfile.fetched", url=url, size=len(resp.content))
        return resp.content


def _check_document(document: Any, location: str) -> None:
    if not isinstance(document, dict):
        raise InvalidDevfileError(location, "devfile must be a YAML mapping")

    schema_version = document.get("schemaVersion")
    if not isinstance(schema_version, str) or not schema_version:
        raise InvalidDevfileError(location, "schemaVersion not present in devfile")
    if not _SCHEMA_VERSION_RE.match(schema_version):
        raise InvalidDevfileError(
            location, f"unsupported schemaVersion {schema_version!r}, expected 2.x.y"
        )

    metadata = document.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise InvalidDevfileError(location, "metadata must be a mapping")

    parent = document.get("parent")
    if parent is not None and not isinstance(parent, dict):
        raise InvalidDevfileError(location, "parent must be a mapping")

    for section in ("components", "commands"):
        entries = document.get(section)
        if entries is None:
            continue
        if not isinstance(entries, list):
            raise InvalidDevfileError(location, f"{section} must be a list")
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise InvalidDevfileError(location, f"{section}[{i}] must be a mapping")
            name = entry.get("name") if section == "components" else entry.get("id")
            if not isinstance(name, str) or not name:
                key = "name" if section == "components" else "id"
                raise InvalidDevfileError(location, f"{section}[{i}] is missing {key!r}")
