"""Pydantic models for rfcs configuration and listing output."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ConfigKey(str, Enum):
    """Keys accepted by `rfcs configure`."""

    GIT_URL = "git.url"
    GIT_REPO = "git.repo"


class GitSettings(BaseModel):
    """Where the proposal repository lives."""

    repo: Path | None = Field(
        default=None,
        description="Path to an existing local checkout",
    )
    url: str | None = Field(
        default=None,
        description="Remote URL to clone when no local checkout is configured",
    )


class Config(BaseModel):
    """Persisted rfcs configuration."""

    git: GitSettings | None = None


class ProposalFile(BaseModel):
    """A proposal document discovered in the repository."""

    path: str
    number: int | None = Field(default=None, ge=0)
