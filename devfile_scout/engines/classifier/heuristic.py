"""Heuristic classifier - language, framework and port detection from files on disk."""

from __future__ import annotations

import json
import logging
import os
import re
from collections import Counter
from pathlib import Path, PurePosixPath

from devfile_scout.engines.classifier.base import DetectedComponent, DetectedLanguage, DevfileType
from devfile_scout.exceptions import NoMatchingDevfileTypeError

logger = logging.getLogger(__name__)

# Language detection by file extension
_EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".java": "Java",
    ".kt": "Kotlin",
    ".go": "Go",
    ".py": "Python",
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".rs": "Rust",
    ".c": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "CSS",
}

# Markup / styling languages never form a component on their own
_MARKUP_LANGUAGES = {"HTML", "CSS"}

_ALIASES: dict[str, list[str]] = {
    "JavaScript": ["Node.js", "nodejs", "node", "js"],
    "TypeScript": ["ts", "Node.js", "nodejs"],
    "Go": ["golang"],
    "C#": [".NET", "dotnet", "csharp"],
    "Python": ["py"],
    "Java": ["jvm"],
}

# Configuration files at the component root, ordered by priority
_CONFIG_FILES: list[tuple[str, str, str]] = [
    ("pom.xml", "Java", "maven"),
    ("build.gradle", "Java", "gradle"),
    ("build.gradle.kts", "Java", "gradle"),
    ("go.mod", "Go", "go-modules"),
    ("package.json", "JavaScript", "npm"),
    ("pyproject.toml", "Python", "pip"),
    ("requirements.txt", "Python", "pip"),
    ("Pipfile", "Python", "pipenv"),
    ("setup.py", "Python", "setuptools"),
    ("Cargo.toml", "Rust", "cargo"),
    ("composer.json", "PHP", "composer"),
    ("Gemfile", "Ruby", "bundler"),
]

# Suffix-matched configuration files
_CONFIG_SUFFIXES: list[tuple[str, str, str]] = [
    (".csproj", "C#", "dotnet"),
    (".fsproj", "C#", "dotnet"),
]

# (needle in config file, framework) per language
_FRAMEWORK_MARKERS: dict[str, list[tuple[str, str]]] = {
    "Java": [
        ("spring-boot", "springboot"),
        ("io.quarkus", "quarkus"),
        ("io.vertx", "vertx"),
        ("io.micronaut", "micronaut"),
        ("io.openliberty", "openliberty"),
        ("wildfly", "wildfly"),
    ],
    "JavaScript": [
        ('"next"', "nextjs"),
        ('"nuxt"', "nuxt"),
        ('"@angular/core"', "angular"),
        ('"react"', "react"),
        ('"vue"', "vue"),
        ('"svelte"', "svelte"),
        ('"express"', "express"),
    ],
    "Python": [
        ("django", "django"),
        ("flask", "flask"),
        ("fastapi", "fastapi"),
    ],
    "Go": [
        ("github.com/gin-gonic/gin", "gin"),
        ("github.com/labstack/echo", "echo"),
        ("github.com/gofiber/fiber", "fiber"),
    ],
}

# Directories to skip during scanning
_SKIP_DIRS = {
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    "__pycache__",
    ".tox",
    ".venv",
    "venv",
    "target",
    "dist",
    "build",
    "vendor",
}

_MIN_COMPONENT_WEIGHT = 20.0

_EXPOSE_RE = re.compile(r"^\s*EXPOSE\s+(.+)$", re.IGNORECASE | re.MULTILINE)
_PROPERTIES_PORT_RE = re.compile(
    r"^\s*(?:server\.port|quarkus\.http\.port)\s*[=:]\s*(\d+)\s*$", re.MULTILINE
)
_YAML_PORT_RE = re.compile(r"^\s*port:\s*(\d+)\s*$", re.MULTILINE)
_ENV_PORT_RE = re.compile(r"^\s*PORT\s*=\s*(\d+)\s*$", re.MULTILINE)
_JS_PORT_RE = re.compile(r"PORT\s*(?:\|\||\?\?)\s*(\d+)|\.listen\(\s*(\d+)")
_PY_PORT_RE = re.compile(r"\bport\s*=\s*(\d+)")
_GO_PORT_RE = re.compile(r"ListenAndServe\(\s*\"[^\":]*:(\d+)\"|\.Run\(\s*\":(\d+)\"")

_BUILD_FILE_NAMES = {"dockerfile", "containerfile"}
_JS_ENTRY_FILES = ("server.js", "app.js", "index.js", "main.js")
_PY_ENTRY_FILES = ("app.py", "main.py", "server.py", "wsgi.py", "manage.py")
_GO_ENTRY_FILES = ("main.go", "server.go")
_PROPERTIES_DIRS = ("", "src/main/resources")


class HeuristicClassifier:
    """Detect languages, frameworks and ports of a component directory."""

    def detect_components(self, path: str) -> list[DetectedComponent]:
        root = Path(path)
        if not root.is_dir():
            raise FileNotFoundError(f"Component path not found: {path}")

        languages = self.detect_languages(path)
        if not any(lang.can_be_component for lang in languages):
            logger.info("No component-capable language detected in %s", path)
            return []

        return [
            DetectedComponent(
                name=root.name,
                path=str(root),
                languages=languages,
                ports=self.detect_ports(path),
            )
        ]

    def detect_languages(self, path: str) -> list[DetectedLanguage]:
        """Languages ordered by priority: configuration file > share of files."""
        root = Path(path)
        config_backed = self._detect_config_languages(root)
        weights = self._language_weights(root)

        found: dict[str, DetectedLanguage] = {}
        for lang in config_backed:
            existing = found.get(lang.name)
            if existing is None:
                lang.weight = weights.get(lang.name, 0.0)
                found[lang.name] = lang
            else:
                existing.tools.extend(t for t in lang.tools if t not in existing.tools)
                existing.frameworks.extend(f for f in lang.frameworks if f not in existing.frameworks)

        ranked = sorted(weights.items(), key=lambda item: (-item[1], item[0]))
        for name, weight in ranked:
            if name in found:
                continue
            found[name] = DetectedLanguage(
                name=name,
                aliases=list(_ALIASES.get(name, [])),
                weight=weight,
                can_be_component=(
                    weight >= _MIN_COMPONENT_WEIGHT and name not in _MARKUP_LANGUAGES
                ),
            )
        return list(found.values())

    def select_devfile_type(self, path: str, devfile_types: list[DevfileType]) -> int:
        """Pick the first catalog type matching the detected languages.

        Priority: framework of a configuration-file-backed language, then
        the configuration-file-backed language itself, then the language
        with the highest share of source files.
        """
        languages = [lang for lang in self.detect_languages(path) if lang.can_be_component]
        config_backed = [lang for lang in languages if lang.config_backed]

        for lang in config_backed:
            for framework in lang.frameworks:
                for index, devfile_type in enumerate(devfile_types):
                    if _matches_language(lang, devfile_type) and _matches_framework(
                        framework, devfile_type
                    ):
                        logger.info(
                            "Matched devfile type %s for %s by framework %s",
                            devfile_type.name,
                            path,
                            framework,
                        )
                        return index

        for lang in config_backed:
            for index, devfile_type in enumerate(devfile_types):
                if _matches_language(lang, devfile_type):
                    logger.info(
                        "Matched devfile type %s for %s by configuration file",
                        devfile_type.name,
                        path,
                    )
                    return index

        by_weight = sorted(
            (lang for lang in languages if not lang.config_backed),
            key=lambda lang: -lang.weight,
        )
        for lang in by_weight:
            for index, devfile_type in enumerate(devfile_types):
                if _matches_language(lang, devfile_type):
                    logger.info(
                        "Matched devfile type %s for %s by language share (%.0f%%)",
                        devfile_type.name,
                        path,
                        lang.weight,
                    )
                    return index

        raise NoMatchingDevfileTypeError(path)

    def detect_ports(self, path: str) -> list[int]:
        """Ports the component probably listens on, sorted and de-duplicated."""
        root = Path(path)
        ports: set[int] = set()

        for entry in _list_files(root):
            if entry.name.lower() in _BUILD_FILE_NAMES:
                for line in _EXPOSE_RE.findall(_read_text(entry)):
                    for token in line.split():
                        ports.update(_to_ports(token.split("/", 1)[0]))

        for sub in _PROPERTIES_DIRS:
            base = root / sub if sub else root
            ports.update(_to_ports(*_PROPERTIES_PORT_RE.findall(_read_text(base / "application.properties"))))
            for name in ("application.yaml", "application.yml"):
                ports.update(_to_ports(*_YAML_PORT_RE.findall(_read_text(base / name))))

        ports.update(_to_ports(*_ENV_PORT_RE.findall(_read_text(root / ".env"))))

        for name in self._js_entry_files(root):
            for groups in _JS_PORT_RE.findall(_read_text(root / name)):
                ports.update(_to_ports(*groups))
        for name in _PY_ENTRY_FILES:
            ports.update(_to_ports(*_PY_PORT_RE.findall(_read_text(root / name))))
        for name in _GO_ENTRY_FILES:
            for groups in _GO_PORT_RE.findall(_read_text(root / name)):
                ports.update(_to_ports(*groups))

        return sorted(ports)

    # ── internal ───────────────────────────────────────────────────────────

    def _detect_config_languages(self, root: Path) -> list[DetectedLanguage]:
        detected: list[DetectedLanguage] = []
        names = {entry.name for entry in _list_files(root)}
        for filename, language, tool in _CONFIG_FILES:
            if filename in names:
                detected.append(self._config_language(root / filename, language, tool))
        for name in sorted(names):
            for suffix, language, tool in _CONFIG_SUFFIXES:
                if name.endswith(suffix):
                    detected.append(self._config_language(root / name, language, tool))
        return detected

    def _config_language(self, config_file: Path, language: str, tool: str) -> DetectedLanguage:
        content = _read_text(config_file).lower()
        frameworks = [
            framework
            for needle, framework in _FRAMEWORK_MARKERS.get(language, [])
            if needle in content
        ]
        if language == "JavaScript" and (config_file.parent / "tsconfig.json").exists():
            tool = f"{tool}+typescript"
        return DetectedLanguage(
            name=language,
            aliases=list(_ALIASES.get(language, [])),
            frameworks=frameworks,
            tools=[tool],
            can_be_component=True,
            config_backed=True,
        )

    def _language_weights(self, root: Path) -> dict[str, float]:
        """Share of source files per language, as a percentage."""
        counter: Counter[str] = Counter()
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            for f in filenames:
                lang = _EXTENSION_TO_LANGUAGE.get(Path(f).suffix.lower())
                if lang:
                    counter[lang] += 1
        total = sum(counter.values())
        if total == 0:
            return {}
        return {lang: round(count * 100 / total, 2) for lang, count in counter.items()}

    @staticmethod
    def _js_entry_files(root: Path) -> list[str]:
        names = list(_JS_ENTRY_FILES)
        try:
            manifest = json.loads(_read_text(root / "package.json") or "{}")
        except ValueError:
            return names
        main = manifest.get("main") if isinstance(manifest, dict) else None
        if isinstance(main, str) and _inside(main) and main not in names:
            names.insert(0, main)
        return names


def _inside(rel: str) -> bool:
    """Whether *rel* stays within the component directory."""
    parts = PurePosixPath(rel.replace("\\", "/"))
    return bool(rel) and not parts.is_absolute() and ".." not in parts.parts


def _normalize(value: str) -> str:
    return re.sub(r"[^a-z0-9#+]", "", value.lower())


def _matches_language(lang: DetectedLanguage, devfile_type: DevfileType) -> bool:
    if not devfile_type.language:
        return False
    wanted = _normalize(devfile_type.language)
    return wanted in {_normalize(lang.name), *(_normalize(a) for a in lang.aliases)}


def _matches_framework(framework: str, devfile_type: DevfileType) -> bool:
    wanted = _normalize(framework)
    candidates = [devfile_type.project_type, *devfile_type.tags]
    return any(_normalize(c) == wanted for c in candidates if c)


def _list_files(root: Path) -> list[Path]:
    try:
        return sorted(p for p in root.iterdir() if p.is_file())
    except OSError:
        return []


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


def _to_ports(*values: str) -> set[int]:
    ports: set[int] = set()
    for value in values:
        if not value or not value.isdigit():
            continue
        port = int(value)
        if 0 < port <= 65535:
            ports.add(port)
    return ports
