"""Repository scan - find devfiles and Dockerfiles per component directory."""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from devfile_scout.config import DEFAULT_HTTP_TIMEOUT
from devfile_scout.core.github import update_git_link
from devfile_scout.engines.catalog.base import DevfileCatalog
from devfile_scout.engines.catalog.client import RegistryClient
from devfile_scout.engines.classifier.base import LanguageClassifier
from devfile_scout.engines.classifier.heuristic import HeuristicClassifier
from devfile_scout.engines.devfile.parser import DevfileParser, YamlDevfileParser
from devfile_scout.engines.devfile.validator import validate_devfile
from devfile_scout.engines.discovery.models import ScanRequest, ScanResult
from devfile_scout.engines.discovery.resolver import ContextResolver
from devfile_scout.exceptions import ScanIOError

log = structlog.get_logger("devfile_scout.engine")

# Devfile names, in precedence order (compared lower-cased)
DEVFILE_NAMES = ("devfile.yaml", ".devfile.yaml", "devfile.yml", ".devfile.yml")
HIDDEN_DEVFILE_DIR = ".devfile"

DOCKERFILE_NAME = "Dockerfile"
CONTAINERFILE_NAME = "Containerfile"
_BUILD_FILE_NAMES = (DOCKERFILE_NAME.lower(), CONTAINERFILE_NAME.lower())

# Directories that may hold the Dockerfile/Containerfile, in precedence order
BUILD_DIRS = ("docker", ".docker", "build")


@dataclass
class ContextListing:
    """What one component directory physically contains."""

    devfiles: list[str] = field(default_factory=list)  # relative paths, precedence order
    dockerfile: str | None = None  # relative path

    @property
    def devfile_present(self) -> bool:
        return bool(self.devfiles)

    @property
    def dockerfile_present(self) -> bool:
        return self.dockerfile is not None


def _list_dir(path: Path) -> list[os.DirEntry[str]]:
    """Directory entries sorted by name; any OSError aborts the scan."""
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise ScanIOError(str(path), exc) from exc


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError as exc:
        raise ScanIOError(entry.path, exc) from exc


def _is_file(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_file()
    except OSError as exc:
        raise ScanIOError(entry.path, exc) from exc


def _devfiles_in(entries: list[os.DirEntry[str]]) -> dict[str, list[str]]:
    """Map lower-cased devfile name -> every actual file name spelling it, sorted."""
    found: dict[str, list[str]] = {}
    for entry in entries:
        lower = entry.name.lower()
        if lower in DEVFILE_NAMES and _is_file(entry):
            found.setdefault(lower, []).append(entry.name)
    return found


def inspect_context(path: Path) -> ContextListing:
    """List the devfiles and the Dockerfile/Containerfile of one component directory.

    ``.devfile/<name>`` counts as the same depth as ``<name>``: both are
    looked up here, nothing deeper is.
    """
    hidden: dict[str, list[str]] = {}
    top_dockerfile: str | None = None
    top_containerfile: str | None = None
    nested: dict[str, str] = {}

    entries = _list_dir(path)
    flat = _devfiles_in(entries)
    for entry in entries:
        lower = entry.name.lower()
        if lower in flat:
            continue
        if entry.name == HIDDEN_DEVFILE_DIR and _is_dir(entry):
            hidden = _devfiles_in(_list_dir(Path(entry.path)))
        elif lower == DOCKERFILE_NAME.lower() and _is_file(entry):
            # Keep the actual spelling, e.g. "dockerfile"
            top_dockerfile = top_dockerfile or entry.name
        elif lower == CONTAINERFILE_NAME.lower() and _is_file(entry):
            top_containerfile = CONTAINERFILE_NAME
        elif entry.name in BUILD_DIRS and _is_dir(entry):
            build_files: dict[str, str] = {}
            for sub in _list_dir(Path(entry.path)):
                if sub.name.lower() in _BUILD_FILE_NAMES and _is_file(sub):
                    build_files.setdefault(sub.name.lower(), sub.name)
            for name in _BUILD_FILE_NAMES:
                if name in build_files:
                    nested[entry.name] = posixpath.join(entry.name, build_files[name])
                    break

    listing = ContextListing()
    listing.devfiles = [actual for name in DEVFILE_NAMES for actual in flat.get(name, [])]
    listing.devfiles += [
        posixpath.join(HIDDEN_DEVFILE_DIR, actual)
        for name in DEVFILE_NAMES
        for actual in hidden.get(name, [])
    ]
    listing.dockerfile = top_dockerfile or top_containerfile
    if listing.dockerfile is None:
        listing.dockerfile = next((nested[d] for d in BUILD_DIRS if d in nested), None)
    return listing


def context_key(prefix: str, name: str) -> str:
    """Context path of directory *name* under *prefix*, e.g. ``./`` + ``api`` -> ``api``."""
    return posixpath.normpath(posixpath.join(prefix or ".", name))


async def scan(
    request: ScanRequest,
    *,
    classifier: LanguageClassifier,
    catalog: DevfileCatalog,
    parser: DevfileParser,
) -> ScanResult:
    """Scan every immediate sub-directory of ``request.root_path``.

    Each sub-directory is one component context.  Any I/O error, invalid
    devfile, invalid source URL or catalog failure aborts the whole scan:
    no partial result is returned.
    """
    result = ScanResult()
    resolver = ContextResolver(classifier, catalog, parser, token=request.token)
    root = Path(request.root_path)

    for entry in _list_dir(root):
        if not _is_dir(entry):
            continue
        cur_path = Path(entry.path)
        context = context_key(request.context_prefix, entry.name)
        log.debug("scan.context_start", context=context, path=str(cur_path))

        listing = inspect_context(cur_path)

        devfile_present = False
        for rel_path in listing.devfiles:
            link = update_git_link(
                request.repo_url, request.revision, posixpath.join(context, rel_path)
            )
            should_ignore, devfile_bytes = await validate_devfile(
                parser, cur_path / rel_path, request.token
            )
            if should_ignore:
                log.info("scan.devfile_ignored", context=context, devfile=rel_path)
                continue
            if not devfile_present:
                result.devfiles[context] = devfile_bytes  # type: ignore[assignment]
                result.devfile_urls[context] = link
                devfile_present = True

        dockerfile_present = listing.dockerfile_present
        if dockerfile_present and devfile_present:
            # The devfile must reference its own Dockerfile
            log.debug(
                "scan.dockerfile_discarded", context=context, dockerfile=listing.dockerfile
            )
            dockerfile_present = False
        elif dockerfile_present:
            result.dockerfiles[context] = listing.dockerfile  # type: ignore[assignment]

        await resolver.analyze_path(
            cur_path,
            context,
            result,
            devfile_present=devfile_present,
            dockerfile_present=dockerfile_present,
        )

    if result.is_empty():
        log.info("scan.nothing_found", root=str(root))

    return result


async def scan_repository(
    request: ScanRequest,
    *,
    http_timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> ScanResult:
    """Scan with the production registry client, YAML parser and heuristic classifier."""
    async with RegistryClient(request.registry_url, timeout=http_timeout) as catalog:
        return await scan(
            request,
            classifier=HeuristicClassifier(),
            catalog=catalog,
            parser=YamlDevfileParser(timeout=http_timeout),
        )
