"""Core data types and interface for language/framework classifiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass
class DetectedLanguage:
    """A language found in a component directory."""

    name: str  # "Java", "JavaScript", "Python", ...
    aliases: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)  # e.g. ["spring-boot"]
    tools: list[str] = field(default_factory=list)  # e.g. ["maven"]
    weight: float = 0.0  # share of source files, 0..100
    can_be_component: bool = False
    config_backed: bool = False  # found through a configuration file


@dataclass
class DetectedComponent:
    """A buildable component as reported by a classifier."""

    name: str
    path: str
    languages: list[DetectedLanguage] = field(default_factory=list)
    ports: list[int] = field(default_factory=list)


@dataclass
class DevfileType:
    """A candidate devfile type offered by the catalog."""

    name: str
    language: str = ""
    project_type: str = ""
    tags: list[str] = field(default_factory=list)


@runtime_checkable
class LanguageClassifier(Protocol):
    """Interface that every classifier must satisfy."""

    def detect_components(self, path: str) -> list[DetectedComponent]: ...

    def select_devfile_type(self, path: str, devfile_types: list[DevfileType]) -> int:
        """Return the index of the best matching type.

        Raises NoMatchingDevfileTypeError when nothing fits.
        """
        ...
