"""Tests for hosted source link construction."""

from __future__ import annotations

import pytest

from devfile_scout.core.github import convert_repo_url, update_git_link
from devfile_scout.exceptions import InvalidSourceURLError


class TestUpdateGitLink:
    def test_github_with_revision(self):
        link = update_git_link("https://github.com/org/repo", "main", "api/devfile.yaml")
        assert link == "https://raw.githubusercontent.com/org/repo/main/api/devfile.yaml"

    def test_github_without_revision_uses_head(self):
        link = update_git_link("https://github.com/org/repo", None, "devfile.yaml")
        assert link == "https://raw.githubusercontent.com/org/repo/HEAD/devfile.yaml"

    def test_empty_revision_uses_head(self):
        link = update_git_link("https://github.com/org/repo", "", "docker/Dockerfile")
        assert link == "https://raw.githubusercontent.com/org/repo/HEAD/docker/Dockerfile"

    def test_strips_dot_git_and_trailing_slash(self):
        link = update_git_link("https://github.com/org/repo.git/", "v1", "a/devfile.yaml")
        assert link == "https://raw.githubusercontent.com/org/repo/v1/a/devfile.yaml"

    def test_tree_url_keeps_its_ref(self):
        link = update_git_link("https://github.com/org/repo/tree/dev", "ignored", "devfile.yaml")
        assert link == "https://raw.githubusercontent.com/org/repo/dev/devfile.yaml"

    def test_tree_url_with_subdirectory(self):
        link = update_git_link("https://github.com/org/repo/tree/dev/services", None, "api")
        assert link == "https://raw.githubusercontent.com/org/repo/dev/services/api"

    @pytest.mark.parametrize("path", ["", ".", "./"])
    def test_empty_path_yields_base(self, path):
        link = update_git_link("https://github.com/org/repo", "main", path)
        assert link == "https://raw.githubusercontent.com/org/repo/main"

    def test_leading_dot_slash_stripped(self):
        link = update_git_link("https://github.com/org/repo", "main", "./api/devfile.yaml")
        assert link == "https://raw.githubusercontent.com/org/repo/main/api/devfile.yaml"

    def test_gitlab(self):
        link = update_git_link("https://gitlab.com/group/repo", "main", "devfile.yaml")
        assert link == "https://gitlab.com/group/repo/-/raw/main/devfile.yaml"

    def test_raw_github_host_kept(self):
        base = "https://raw.githubusercontent.com/org/repo/main"
        assert update_git_link(base, "other", "devfile.yaml") == f"{base}/devfile.yaml"

    def test_other_host_kept(self):
        link = update_git_link("https://git.example.com/org/repo", "main", "devfile.yaml")
        assert link == "https://git.example.com/org/repo/devfile.yaml"


class TestInvalidSourceURL:
    @pytest.mark.parametrize(
        "url",
        [
            "",
            "github.com/org/repo",
            "git@github.com:org/repo.git",
            "ftp://github.com/org/repo",
            "https://",
        ],
    )
    def test_rejected(self, url):
        with pytest.raises(InvalidSourceURLError):
            update_git_link(url, "main", "devfile.yaml")

    def test_github_without_repo_rejected(self):
        with pytest.raises(InvalidSourceURLError):
            convert_repo_url("https://github.com/org")

    def test_error_carries_url(self):
        with pytest.raises(InvalidSourceURLError) as exc_info:
            convert_repo_url("not a url")
        assert exc_info.value.url == "not a url"
