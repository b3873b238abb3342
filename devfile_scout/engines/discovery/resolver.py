"""Per-context resolution - devfile Dockerfile lookup and catalog fallback."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from devfile_scout.core.github import update_git_link
from devfile_scout.engines.catalog.base import DevfileCatalog
from devfile_scout.engines.classifier.base import LanguageClassifier
from devfile_scout.engines.devfile.parser import DevfileParser
from devfile_scout.engines.devfile.validator import search_for_dockerfile
from devfile_scout.engines.discovery.models import ScanResult
from devfile_scout.exceptions import NoDevfileFoundError, NoMatchingDevfileTypeError, ScanError

log = structlog.get_logger("devfile_scout.engine")

# Name of the devfile at the root of every registry sample
SAMPLE_DEVFILE = "devfile.yaml"


@dataclass
class DetectedDevfile:
    """A devfile matched from the catalog for a component directory."""

    devfile_bytes: bytes
    devfile_url: str
    sample_name: str
    sample_repo_url: str
    ports: list[int] = field(default_factory=list)


def _is_absolute_uri(uri: str) -> bool:
    return uri.startswith(("http://", "https://"))


class ContextResolver:
    """Fill in what a context still lacks after its files were inspected."""

    def __init__(
        self,
        classifier: LanguageClassifier,
        catalog: DevfileCatalog,
        parser: DevfileParser,
        token: str | None = None,
    ) -> None:
        self._classifier = classifier
        self._catalog = catalog
        self._parser = parser
        self._token = token

    async def analyze_path(
        self,
        path: Path,
        context: str,
        result: ScanResult,
        *,
        devfile_present: bool,
        dockerfile_present: bool,
    ) -> None:
        """Resolve the Dockerfile (and, if needed, the devfile) for *context*.

        Entries of *result* keyed by *context* may be added:
            devfiles / devfile_urls - only when no devfile was present
            dockerfiles             - absolute Dockerfile URL
            ports                   - ports reported by the classifier
        """
        if devfile_present:
            image = await search_for_dockerfile(
                self._parser, result.devfiles.get(context), self._token
            )
            if image is not None:
                # A relative uri is resolved by the build against the devfile itself
                if _is_absolute_uri(image.uri):
                    result.dockerfiles[context] = image.uri
                dockerfile_present = True

        if not dockerfile_present:
            try:
                detected = await self.analyze_and_detect_devfile(path)
            except NoDevfileFoundError as exc:
                log.info("detect.no_devfile", context=context, location=exc.location)
                return

            if not devfile_present:
                result.devfiles[context] = detected.devfile_bytes
                result.devfile_urls[context] = detected.devfile_url

            image = await search_for_dockerfile(
                self._parser, detected.devfile_bytes, self._token
            )
            uri = image.uri if image is not None else ""
            if _is_absolute_uri(uri):
                result.dockerfiles[context] = uri
            else:
                result.dockerfiles[context] = update_git_link(detected.sample_repo_url, "", uri)
            result.set_ports(context, detected.ports)
            log.info(
                "detect.matched",
                context=context,
                sample=detected.sample_name,
                dockerfile=result.dockerfiles[context],
                ports=detected.ports,
            )
            return

        if not devfile_present:
            await self._harvest_ports(path, context, result)

    async def analyze_and_detect_devfile(self, path: Path) -> DetectedDevfile:
        """Match *path* against the catalog and fetch the sample's devfile.

        Raises NoDevfileFoundError when no component or matching type is found.
        """
        devfile_types = await self._catalog.get_devfile_types()

        components = self._classifier.detect_components(str(path))
        if not components:
            raise NoDevfileFoundError(str(path))

        # Multi-component directories are split by the scanner already
        component = components[0]
        if not any(lang.can_be_component for lang in component.languages):
            raise NoDevfileFoundError(str(path))

        try:
            index = self._classifier.select_devfile_type(str(path), devfile_types)
        except NoMatchingDevfileTypeError as exc:
            raise NoDevfileFoundError(str(path)) from exc
        detected_type = devfile_types[index]

        sample_repo_url = await self._catalog.resolve_sample_repository(detected_type.name)
        devfile_url = update_git_link(sample_repo_url, "", SAMPLE_DEVFILE)

        # Registry samples are public, no token
        model = await self._parser.parse(url=devfile_url)
        devfile_bytes = self._parser.marshal(model)
        if not devfile_bytes:
            raise NoDevfileFoundError(str(path))

        return DetectedDevfile(
            devfile_bytes=devfile_bytes,
            devfile_url=devfile_url,
            sample_name=detected_type.name,
            sample_repo_url=sample_repo_url,
            ports=list(component.ports),
        )

    async def _harvest_ports(self, path: Path, context: str, result: ScanResult) -> None:
        """Record ports for a context that only has a Dockerfile."""
        try:
            detected = await self.analyze_and_detect_devfile(path)
        except ScanError as exc:
            log.info("detect.port_harvest_failed", context=context, error=str(exc))
            return
        result.set_ports(context, detected.ports)
