"""Language/framework classification of component directories."""

from devfile_scout.engines.classifier.base import (
    DetectedComponent,
    DetectedLanguage,
    DevfileType,
    LanguageClassifier,
)
from devfile_scout.engines.classifier.heuristic import HeuristicClassifier

__all__ = [
    "DetectedComponent",
    "DetectedLanguage",
    "DevfileType",
    "HeuristicClassifier",
    "LanguageClassifier",
]
