"""Devfile validation and Dockerfile extraction."""

from __future__ import annotations

from pathlib import Path

import structlog

from devfile_scout.engines.devfile.model import DevfileModel, DockerfileImage
from devfile_scout.engines.devfile.parser import DevfileParser
from devfile_scout.exceptions import InvalidDevfileError, ScanIOError

log = structlog.get_logger("devfile_scout.engine")


def is_ignore_sentinel(model: DevfileModel) -> bool:
    """A devfile that declares no components and no commands.

    Such files (empty bodies, metadata-only or bare ``parent`` references)
    describe nothing buildable and are treated as if they were absent.
    """
    return not model.components() and not model.commands


async def validate_devfile(
    parser: DevfileParser,
    devfile_path: Path,
    token: str | None = None,
) -> tuple[bool, bytes | None]:
    """Parse the devfile at *devfile_path*.

    Returns ``(should_ignore, devfile_bytes)``.  When the devfile is an
    ignore-sentinel, ``devfile_bytes`` is ``None``.

    Raises InvalidDevfileError if the devfile cannot be parsed, and
    ScanIOError if it cannot be read.
    """
    log.info("devfile.validate", location=str(devfile_path))
    try:
        data = devfile_path.read_bytes()
    except OSError as exc:
        raise ScanIOError(str(devfile_path), exc) from exc

    try:
        model = await parser.parse(data=data, token=token)
    except InvalidDevfileError as exc:
        log.error("devfile.invalid", location=str(devfile_path), reason=exc.reason)
        raise InvalidDevfileError(str(devfile_path), exc.reason) from exc

    if is_ignore_sentinel(model):
        return True, None
    return False, parser.marshal(model)


async def search_for_dockerfile(
    parser: DevfileParser,
    devfile_bytes: bytes | None,
    token: str | None = None,
) -> DockerfileImage | None:
    """Return the first image component's Dockerfile that has a uri, else None.

    *token* is needed if the devfile has a parent in a private repository.
    """
    if not devfile_bytes:
        return None
    model = await parser.parse(data=devfile_bytes, token=token)
    for image in model.image_dockerfiles():
        if image.uri:
            return image
    return None
