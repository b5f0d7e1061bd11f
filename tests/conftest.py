"""Shared test configuration and fixtures."""

import json
from pathlib import Path

import pytest

from git_overlap.config import OverlapSettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_URL = "https://api.github.com"
REPO_URL = "https://github.com/marcoganassin96/git-conflicts-predictor-tester-github.git"
REPO_SLUG = "marcoganassin96/git-conflicts-predictor-tester-github"
TARGET_FILES = "README.md,sparkling_water/ai_engine/ai.py"


def load_fixture(name: str):
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def test_settings():
    return OverlapSettings(
        github_token="ghp_test123",
        github_api_url=BASE_URL,
        gh_command="gh",
        git_command="git",
        debug=False,
    )


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    for name in ("GITHUB_TOKEN", "GIT_OVERLAP_GITHUB_TOKEN", "DEBUG", "GIT_OVERLAP_DEBUG", "GIT_OVERLAP_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
