"""Core business logic for flexvers.

This module contains the fundamental building blocks:
- Semantic version parsing and incrementing
- Conventional commit classification
- Branch rules
- Release boundary detection
- Changelog rendering
"""

from __future__ import annotations

from flexvers.core.changelog import render_changelog
from flexvers.core.commits import ClassifiedCommit, classify_commit
from flexvers.core.releases import (
    Contributor,
    PolicyFlags,
    Release,
    ReleaseBuilder,
    build_releases,
)
from flexvers.core.rules import BranchRule, Ruleset, resolve_branch_rule
from flexvers.core.version import CommitType, ReleaseKind, SemanticVersion

__all__ = [
    # Version
    "CommitType",
    "ReleaseKind",
    "SemanticVersion",
    # Commits
    "ClassifiedCommit",
    "classify_commit",
    # Rules
    "BranchRule",
    "Ruleset",
    "resolve_branch_rule",
    # Releases
    "Contributor",
    "PolicyFlags",
    "Release",
    "ReleaseBuilder",
    "build_releases",
    # Changelog
    "render_changelog",
]
