"""Pydantic models for overlap detection runs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class AccessMethod(str, Enum):
    CLI = "cli"  # authenticated `gh` CLI
    API = "api"  # REST API with an access token


class PRSummary(BaseModel):
    """An open, unmerged pull request as listed by the provider."""

    number: int = Field(gt=0)
    branch: str

    model_config = {"frozen": True}


class PRMatch(BaseModel):
    """One pull request that modifies a target file."""

    branch: str
    number: int

    model_config = {"frozen": True}


class OverlapReport(BaseModel):
    repo_slug: str
    method: AccessMethod
    target_files: list[str] = []
    prs_analyzed: int = 0
    # file path -> matching PRs, in provider listing order
    overlaps: dict[str, list[PRMatch]] = {}

    @property
    def has_overlaps(self) -> bool:
        return bool(self.overlaps)
