"""In-memory devfile model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Component union members of the devfile 2.x schema
COMPONENT_KINDS = ("container", "kubernetes", "openshift", "image", "volume", "custom")


@dataclass(frozen=True)
class DockerfileImage:
    """The ``image.dockerfile`` declaration of an image component."""

    uri: str
    build_context: str = ""
    root_required: bool = False


class DevfileModel:
    """Read-only accessors over a parsed devfile document."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    @property
    def schema_version(self) -> str:
        return self._data.get("schemaVersion", "")

    @property
    def metadata(self) -> dict[str, Any]:
        return self._data.get("metadata") or {}

    @property
    def parent(self) -> dict[str, Any] | None:
        return self._data.get("parent")

    @property
    def commands(self) -> list[dict[str, Any]]:
        return list(self._data.get("commands") or [])

    def components(self, kind: str | None = None) -> list[dict[str, Any]]:
        components = list(self._data.get("components") or [])
        if kind is None:
            return components
        return [c for c in components if component_kind(c) == kind]

    def image_dockerfiles(self) -> list[DockerfileImage]:
        """Dockerfile declarations of every image component, in document order."""
        images: list[DockerfileImage] = []
        for component in self.components("image"):
            dockerfile = (component.get("image") or {}).get("dockerfile")
            if not isinstance(dockerfile, dict):
                continue
            images.append(
                DockerfileImage(
                    uri=str(dockerfile.get("uri") or ""),
                    build_context=str(dockerfile.get("buildContext") or ""),
                    root_required=bool(dockerfile.get("rootRequired", False)),
                )
            )
        return images

    def to_dict(self) -> dict[str, Any]:
        return self._data


def component_kind(component: dict[str, Any]) -> str | None:
    for kind in COMPONENT_KINDS:
        if kind in component:
            return kind
    return None
