"""Shared fixtures."""

from __future__ import annotations

import json
import subprocess
from datetime import datetime
from itertools import count
from pathlib import Path
from typing import Callable

import pytest

from flexvers.core.rules import Ruleset
from flexvers.vcs.git import Commit

_sha_counter = count(1)


def make_commit(
    message: str,
    author_name: str = "Test",
    author_email: str = "test@test.com",
    sha: str | None = None,
    tags: tuple[str, ...] = (),
) -> Commit:
    """Build a commit with a unique sha."""
    return Commit(
        sha=sha or f"{next(_sha_counter):040x}",
        message=message,
        author_name=author_name,
        author_email=author_email,
        date=datetime(2024, 1, 1, 12, 0, 0),
        tags=tags,
    )


@pytest.fixture
def commit_factory() -> Callable[..., Commit]:
    return make_commit


@pytest.fixture
def ruleset() -> Ruleset:
    """Ruleset with a small, explicit token map."""
    return Ruleset(
        type_tokens={
            "MAJOR": ("!",),
            "MINOR": ("feat",),
            "PATCH": ("fix",),
        },
        release_tokens=("release",),
        prerelease_tokens=("pre",),
    )


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat: add user authentication", sha="feat123" + "0" * 33)


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix(core): handle null response", sha="fix456" + "0" * 34)


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("feat!: redesign API", sha="break789" + "0" * 32)


@pytest.fixture
def semver_config() -> dict:
    """A complete ``.semver.json`` document."""
    return {
        "tagging": {"supported_repositories": {"github": {"enabled": True}}},
        "branches": [
            {"name": "^develop$", "prerelease": True},
            {"name": "^hotfix/", "increment": ["PATCH"]},
        ],
        "commits": {
            "default": "PATCH",
            "caseSensitive": False,
            "release": ["release"],
            "prerelease": ["pre"],
            "map": {
                "MAJOR": ["breaking"],
                "MINOR": ["feat"],
                "PATCH": ["fix", "docs", "chore"],
            },
        },
    }


def _git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git():
    """Run git in a directory and return stdout."""
    return _git


@pytest.fixture
def temp_git_repo(tmp_path: Path, semver_config: dict) -> Path:
    """A git repository on ``main`` with a configuration file and one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "checkout", "-q", "-b", "main")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "config", "tag.gpgsign", "false")
    (repo / ".semver.json").write_text(json.dumps(semver_config))
    _git(repo, "add", ".semver.json")
    _git(repo, "commit", "-q", "-m", "chore: initial commit")
    return repo


@pytest.fixture
def commit_to():
    """Create an empty commit with a message in a repository."""

    def _commit(repo: Path, message: str, author: str = "Test User <test@example.com>") -> str:
        _git(repo, "commit", "-q", "--allow-empty", "-m", message, "--author", author)
        return _git(repo, "rev-parse", "HEAD")

    return _commit
