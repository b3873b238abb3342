"""Devfile parsing, validation and Dockerfile extraction."""

from devfile_scout.engines.devfile.model import DevfileModel, DockerfileImage
from devfile_scout.engines.devfile.parser import DevfileParser, YamlDevfileParser
from devfile_scout.engines.devfile.validator import (
    is_ignore_sentinel,
    search_for_dockerfile,
    validate_devfile,
)

__all__ = [
    "DevfileModel",
    "DevfileParser",
    "DockerfileImage",
    "YamlDevfileParser",
    "is_ignore_sentinel",
    "search_for_dockerfile",
    "validate_devfile",
]
