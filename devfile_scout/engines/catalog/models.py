"""Devfile registry index schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GitRemotes(BaseModel):
    model_config = ConfigDict(extra="ignore")

    remotes: dict[str, str] = Field(default_factory=dict)


class SampleIndexEntry(BaseModel):
    """One entry of ``GET /index/sample``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    language: str = ""
    project_type: str = Field(default="", alias="projectType")
    tags: list[str] = Field(default_factory=list)
    git: GitRemotes | None = None

    def repository_url(self) -> str | None:
        """The ``origin`` remote, else the first remote by name."""
        if self.git is None or not self.git.remotes:
            return None
        remotes = self.git.remotes
        if "origin" in remotes:
            return remotes["origin"]
        return remotes[sorted(remotes)[0]]
