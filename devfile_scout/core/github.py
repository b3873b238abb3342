"""Hosted source link utilities."""

from __future__ import annotations

from urllib.parse import urlsplit

from devfile_scout.exceptions import InvalidSourceURLError

_GITHUB_HOST = "github.com"
_GITHUB_RAW_HOST = "raw.githubusercontent.com"


def update_git_link(repo_url: str, revision: str | None, path: str) -> str:
    """Return a revision-pinned raw link to *path* inside *repo_url*.

    Handles:
      - https://github.com/owner/repo            -> raw.githubusercontent.com/owner/repo/<rev>/<path>
      - https://github.com/owner/repo/tree/<rev> -> raw.githubusercontent.com/owner/repo/<rev>/<path>
      - https://gitlab.com/group/repo            -> gitlab.com/group/repo/-/raw/<rev>/<path>

    Without a revision, ``HEAD`` is used.  Links on any other host are
    taken to be raw already and only get *path* appended.

    Raises InvalidSourceURLError if *repo_url* is not an http(s) URL.
    """
    base = convert_repo_url(repo_url, revision)
    path = _normalize_path(path)
    if path:
        return f"{base}/{path}"
    return base


def convert_repo_url(repo_url: str, revision: str | None = None) -> str:
    """Convert a repository browse URL into the raw-content base URL."""
    url = _strip_repo_url(repo_url)
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https"):
        raise InvalidSourceURLError(repo_url, "only http and https URLs are supported")
    if not parts.netloc:
        raise InvalidSourceURLError(repo_url, "missing host")

    host = parts.netloc.lower()
    ref = revision or "HEAD"

    if host == _GITHUB_HOST:
        segments = [s for s in parts.path.split("/") if s]
        if len(segments) < 2:
            raise InvalidSourceURLError(repo_url, "expected https://github.com/<owner>/<repo>")
        if len(segments) > 3 and segments[2] == "tree":
            # Browse links already carry the ref: owner/repo/tree/<ref>[/sub/dir]
            del segments[2]
        else:
            segments.append(ref)
        return f"{parts.scheme}://{_GITHUB_RAW_HOST}/" + "/".join(segments)

    if "gitlab" in host and "/-/" not in parts.path:
        return f"{url}/-/raw/{ref}"

    return url


def _strip_repo_url(repo_url: str) -> str:
    url = repo_url.strip().rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]
    return url


def _normalize_path(path: str) -> str:
    path = path.strip()
    while path.startswith("./"):
        path = path[2:]
    if path in ("", "."):
        return ""
    return path.lstrip("/")
