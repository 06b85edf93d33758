"""Version control access."""

from __future__ import annotations

from flexvers.vcs.git import Commit, GitCredentials, GitRepository, History
from flexvers.vcs.tagging import tag_release

__all__ = [
    "Commit",
    "GitCredentials",
    "GitRepository",
    "History",
    "tag_release",
]
