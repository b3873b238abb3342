"""Tests for HeuristicClassifier - pure filesystem logic."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from devfile_scout.engines.classifier.base import DevfileType, LanguageClassifier
from devfile_scout.engines.classifier.heuristic import HeuristicClassifier
from devfile_scout.exceptions import NoMatchingDevfileTypeError

CATALOG = [
    DevfileType(name="go-basic", language="Go", project_type="Go", tags=["Go"]),
    DevfileType(name="nodejs-basic", language="JavaScript", project_type="Node.js", tags=["NodeJS"]),
    DevfileType(name="java-maven", language="Java", project_type="Maven", tags=["Java"]),
    DevfileType(name="java-springboot-basic", language="Java", project_type="springboot", tags=["Spring"]),
    DevfileType(name="python-basic", language="Python", project_type="Python", tags=["Python"]),
    DevfileType(name="python-flask", language="Python", project_type="Flask", tags=["Flask"]),
]


def _write(root: Path, files: dict[str, str]) -> str:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return str(root)


class TestDetectLanguages:
    def test_satisfies_protocol(self):
        assert isinstance(HeuristicClassifier(), LanguageClassifier)

    def test_config_file_backed_first(self, tmp_path: Path):
        path = _write(
            tmp_path,
            {
                "pom.xml": "<project></project>",
                "src/main/App.java": "class App {}",
                "web/a.js": "",
                "web/b.js": "",
                "web/c.js": "",
            },
        )
        languages = HeuristicClassifier().detect_languages(path)
        assert languages[0].name == "Java"
        assert languages[0].config_backed
        assert languages[0].tools == ["maven"]
        assert languages[1].name == "JavaScript"
        assert languages[1].weight == 75.0

    def test_framework_from_config(self, tmp_path: Path):
        path = _write(
            tmp_path,
            {"pom.xml": "<artifactId>spring-boot-starter-web</artifactId>"},
        )
        languages = HeuristicClassifier().detect_languages(path)
        assert languages[0].frameworks == ["springboot"]

    def test_framework_case_insensitive(self, tmp_path: Path):
        path = _write(tmp_path, {"requirements.txt": "Flask==3.0\n"})
        assert HeuristicClassifier().detect_languages(path)[0].frameworks == ["flask"]

    def test_multiple_python_configs_merge(self, tmp_path: Path):
        path = _write(tmp_path, {"pyproject.toml": "", "requirements.txt": "django\n"})
        languages = HeuristicClassifier().detect_languages(path)
        assert [lang.name for lang in languages] == ["Python"]
        assert languages[0].tools == ["pip"]
        assert languages[0].frameworks == ["django"]

    def test_markup_cannot_be_component(self, tmp_path: Path):
        path = _write(tmp_path, {"index.html": "", "style.css": ""})
        languages = HeuristicClassifier().detect_languages(path)
        assert languages
        assert not any(lang.can_be_component for lang in languages)

    def test_low_share_cannot_be_component(self, tmp_path: Path):
        files = {f"src/m{i}.go": "" for i in range(9)}
        files["tools/x.py"] = ""
        path = _write(tmp_path, files)
        by_name = {lang.name: lang for lang in HeuristicClassifier().detect_languages(path)}
        assert by_name["Go"].can_be_component
        assert not by_name["Python"].can_be_component

    def test_skips_dependency_dirs(self, tmp_path: Path):
        path = _write(tmp_path, {"main.go": "", "node_modules/lib/index.js": ""})
        names = [lang.name for lang in HeuristicClassifier().detect_languages(path)]
        assert names == ["Go"]


class TestDetectComponents:
    def test_component_with_ports(self, tmp_path: Path):
        path = _write(
            tmp_path,
            {
                "package.json": json.dumps({"main": "src/server.js"}),
                "src/server.js": "app.listen(process.env.PORT || 3000)",
                "Dockerfile": "FROM node\nEXPOSE 8080/tcp 9090\n",
            },
        )
        components = HeuristicClassifier().detect_components(path)
        assert len(components) == 1
        assert components[0].name == tmp_path.name
        assert components[0].ports == [3000, 8080, 9090]

    def test_no_component(self, tmp_path: Path):
        path = _write(tmp_path, {"README.md": "# docs"})
        assert HeuristicClassifier().detect_components(path) == []

    def test_missing_dir(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            HeuristicClassifier().detect_components(str(tmp_path / "nope"))


class TestDetectPorts:
    def test_spring_properties(self, tmp_path: Path):
        path = _write(
            tmp_path, {"src/main/resources/application.properties": "server.port=8081\n"}
        )
        assert HeuristicClassifier().detect_ports(path) == [8081]

    def test_env_file(self, tmp_path: Path):
        path = _write(tmp_path, {".env": "PORT=5000\nDEBUG=1\n"})
        assert HeuristicClassifier().detect_ports(path) == [5000]

    def test_python_entry(self, tmp_path: Path):
        path = _write(tmp_path, {"app.py": "app.run(host='0.0.0.0', port=5001)\n"})
        assert HeuristicClassifier().detect_ports(path) == [5001]

    def test_go_entry(self, tmp_path: Path):
        path = _write(tmp_path, {"main.go": 'http.ListenAndServe(":8082", nil)\n'})
        assert HeuristicClassifier().detect_ports(path) == [8082]

    def test_out_of_range_ignored(self, tmp_path: Path):
        path = _write(tmp_path, {"Containerfile": "EXPOSE 70000 443\n"})
        assert HeuristicClassifier().detect_ports(path) == [443]

    def test_package_main_entry(self, tmp_path: Path):
        path = _write(
            tmp_path,
            {
                "package.json": json.dumps({"main": "lib/start.js"}),
                "lib/start.js": "server.listen(process.env.PORT || 4000)",
            },
        )
        assert HeuristicClassifier().detect_ports(path) == [4000]

    @pytest.mark.parametrize("main", ["../server.js", "lib/../../server.js", "ABSOLUTE"])
    def test_package_main_outside_component_ignored(self, tmp_path: Path, main):
        (tmp_path / "server.js").write_text("app.listen(process.env.PORT || 3000)")
        if main == "ABSOLUTE":
            main = str(tmp_path / "server.js")
        path = _write(tmp_path / "app", {"package.json": json.dumps({"main": main})})
        assert HeuristicClassifier().detect_ports(path) == []

    def test_none(self, tmp_path: Path):
        assert HeuristicClassifier().detect_ports(str(tmp_path)) == []


class TestSelectDevfileType:
    def test_framework_match_wins(self, tmp_path: Path):
        path = _write(tmp_path, {"pom.xml": "<groupId>org.springframework.boot</groupId> spring-boot"})
        index = HeuristicClassifier().select_devfile_type(path, CATALOG)
        assert CATALOG[index].name == "java-springboot-basic"

    def test_config_language_match(self, tmp_path: Path):
        path = _write(tmp_path, {"pom.xml": "<project/>"})
        index = HeuristicClassifier().select_devfile_type(path, CATALOG)
        assert CATALOG[index].name == "java-maven"

    def test_config_outranks_percentage(self, tmp_path: Path):
        files = {f"scripts/s{i}.py": "" for i in range(5)}
        files["go.mod"] = "module example.com/m\n"
        files["main.go"] = ""
        path = _write(tmp_path, files)
        index = HeuristicClassifier().select_devfile_type(path, CATALOG)
        assert CATALOG[index].name == "go-basic"

    def test_percentage_match(self, tmp_path: Path):
        path = _write(tmp_path, {"a.py": "", "b.py": ""})
        index = HeuristicClassifier().select_devfile_type(path, CATALOG)
        assert CATALOG[index].name == "python-basic"

    def test_alias_match(self, tmp_path: Path):
        path = _write(tmp_path, {"package.json": "{}"})
        catalog = [DevfileType(name="node", language="Node.js")]
        assert HeuristicClassifier().select_devfile_type(path, catalog) == 0

    def test_no_match(self, tmp_path: Path):
        path = _write(tmp_path, {"Cargo.toml": "[package]\n"})
        with pytest.raises(NoMatchingDevfileTypeError):
            HeuristicClassifier().select_devfile_type(path, CATALOG)
