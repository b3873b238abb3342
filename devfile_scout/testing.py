"""Test doubles for devfile_scout - use in unit and integration tests.

Usage::

    from devfile_scout.testing import FakeClassifier, FakeRegistry, InMemoryDevfileParser

    registry = FakeRegistry({"nodejs-basic": "https://github.com/devfile-samples/nodejs-basic"})
    classifier = FakeClassifier(default=FakeClassifier.component("JavaScript", ports=[3000]))
    parser = InMemoryDevfileParser({url: devfile_yaml_bytes})
"""

from __future__ import annotations

from pathlib import Path

from devfile_scout.engines.classifier.base import (
    DetectedComponent,
    DetectedLanguage,
    DevfileType,
)
from devfile_scout.engines.devfile.model import DevfileModel
from devfile_scout.engines.devfile.parser import YamlDevfileParser
from devfile_scout.exceptions import (
    CatalogLookupError,
    InvalidDevfileError,
    NoMatchingDevfileTypeError,
)


class FakeClassifier:
    """Classifier keyed by component directory name.

    Parameters
    ----------
    components:
        Directory name -> components reported for it.
    matches:
        Directory name -> devfile type name to select.  Directories not
        listed here raise NoMatchingDevfileTypeError.
    default:
        Components reported for directories missing from *components*.
    """

    def __init__(
        self,
        components: dict[str, list[DetectedComponent]] | None = None,
        matches: dict[str, str] | None = None,
        *,
        default: list[DetectedComponent] | None = None,
        default_match: str | None = None,
    ) -> None:
        self._components = components or {}
        self._matches = matches or {}
        self._default = default or []
        self._default_match = default_match
        self._calls: list[str] = []

    @property
    def calls(self) -> list[str]:
        """Directory names passed to ``detect_components``."""
        return self._calls

    @staticmethod
    def component(
        language: str,
        *,
        ports: list[int] | None = None,
        can_be_component: bool = True,
    ) -> list[DetectedComponent]:
        return [
            DetectedComponent(
                name=language.lower(),
                path="",
                languages=[DetectedLanguage(name=language, can_be_component=can_be_component)],
                ports=list(ports or []),
            )
        ]

    def detect_components(self, path: str) -> list[DetectedComponent]:
        name = Path(path).name
        self._calls.append(name)
        return self._components.get(name, self._default)

    def select_devfile_type(self, path: str, devfile_types: list[DevfileType]) -> int:
        wanted = self._matches.get(Path(path).name, self._default_match)
        for index, devfile_type in enumerate(devfile_types):
            if devfile_type.name == wanted:
                return index
        raise NoMatchingDevfileTypeError(path)


class FakeRegistry:
    """In-memory devfile catalog: sample name -> repository URL."""

    def __init__(
        self,
        samples: dict[str, str] | None = None,
        *,
        registry_url: str = "https://registry.example.com",
        languages: dict[str, str] | None = None,
    ) -> None:
        self.registry_url = registry_url
        self._samples = dict(samples or {})
        self._languages = languages or {}
        self.lookups: list[str] = []

    async def get_devfile_types(self) -> list[DevfileType]:
        return [
            DevfileType(name=name, language=self._languages.get(name, ""))
            for name in self._samples
        ]

    async def resolve_sample_repository(self, sample_name: str) -> str:
        self.lookups.append(sample_name)
        try:
            return self._samples[sample_name]
        except KeyError:
            raise CatalogLookupError(
                f"sample {sample_name!r} not found in {self.registry_url}"
            ) from None


class InMemoryDevfileParser(YamlDevfileParser):
    """YAML parser whose URL fetches are served from a dict."""

    def __init__(self, documents: dict[str, bytes] | None = None) -> None:
        super().__init__()
        self._documents = dict(documents or {})
        self.fetched: list[str] = []

    async def parse(
        self,
        *,
        data: bytes | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> DevfileModel:
        if data is None and url is not None:
            self.fetched.append(url)
            if url not in self._documents:
                raise InvalidDevfileError(url, "fetch failed with status 404")
            data = self._documents[url]
        return await super().parse(data=data, url=url, token=token)


# ── Sample devfile documents ─────────────────────────────────────────────

REPO_URL = "https://github.com/org/repo"
SAMPLE_REPO = "https://github.com/devfile-samples/nodejs-basic"
SAMPLE_DEVFILE_URL = "https://raw.githubusercontent.com/devfile-samples/nodejs-basic/HEAD/devfile.yaml"

DEVFILE_WITH_RELATIVE_DOCKERFILE = b"""\
schemaVersion: 2.2.0
metadata:
  name: api
components:
  - name: image-build
    image:
      imageName: api:latest
      dockerfile:
        uri: docker/Dockerfile
        buildContext: .
"""

DEVFILE_WITH_ABSOLUTE_DOCKERFILE = b"""\
schemaVersion: 2.2.0
metadata:
  name: web
components:
  - name: image-build
    image:
      imageName: web:latest
      dockerfile:
        uri: https://example.com/build/Dockerfile
"""

DEVFILE_WITHOUT_IMAGE = b"""\
schemaVersion: 2.2.0
metadata:
  name: worker
components:
  - name: runtime
    container:
      image: registry.access.redhat.com/ubi9/nodejs-18:latest
"""

PARENT_ONLY_DEVFILE = b"""\
schemaVersion: 2.2.0
parent:
  id: nodejs
  registryUrl: https://registry.devfile.io
"""

INVALID_DEVFILE = b"""\
metadata:
  name: no-schema-version
components:
  - name: runtime
    container:
      image: foo
"""

SAMPLE_DEVFILE = b"""\
schemaVersion: 2.2.0
metadata:
  name: nodejs-basic
components:
  - name: image-build
    image:
      imageName: nodejs-image:latest
      dockerfile:
        uri: docker/Dockerfile
        buildContext: .
"""
