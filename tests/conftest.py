"""Shared pytest fixtures for devfile-scout tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def repo(tmp_path: Path):
    """Factory writing files under a repository root: repo({"api/devfile.yaml": b"..."})."""

    def _make(files: dict[str, bytes | str]) -> Path:
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                content = content.encode()
            target.write_bytes(content)
        return tmp_path

    return _make
