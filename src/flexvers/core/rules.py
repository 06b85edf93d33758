"""Ruleset and branch rule resolution.

A :class:`Ruleset` is the compiled form of the configuration that the
classifier and the release walk consume. Branch patterns are compiled
once here so that an invalid pattern fails before any commit is read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from flexvers.core.version import CommitType
from flexvers.exceptions import UnsupportedBranchPatternError

if TYPE_CHECKING:
    from flexvers.config.models import FlexversConfig


@dataclass(frozen=True)
class BranchRule:
    """Override applied to branches whose name matches ``pattern``."""

    pattern: re.Pattern[str]
    prerelease: bool | None = None
    allowed_types: frozenset[CommitType] | None = None

    @classmethod
    def compile(
        cls,
        name_pattern: str,
        prerelease: bool | None = None,
        allowed_types: list[CommitType] | None = None,
    ) -> BranchRule:
        """Build a rule from its configured form.

        Raises:
            UnsupportedBranchPatternError: If ``name_pattern`` is not a valid regex
        """
        try:
            pattern = re.compile(name_pattern)
        except re.error as e:
            raise UnsupportedBranchPatternError(name_pattern, str(e)) from e
        return cls(
            pattern=pattern,
            prerelease=prerelease,
            allowed_types=frozenset(allowed_types) if allowed_types is not None else None,
        )

    def matches(self, branch: str) -> bool:
        return self.pattern.search(branch) is not None


@dataclass(frozen=True)
class Ruleset:
    """Declarative rules driving commit classification and release cuts.

    Attributes:
        default_type: Commit type used when no token matches
        case_sensitive: Exact, case-sensitive token matching when True;
            case-insensitive containment otherwise
        type_tokens: Commit type name to tokens, in configuration order
        release_tokens: Scope tokens triggering a release
        prerelease_tokens: Scope tokens triggering a pre-release
        branch_rules: Branch overrides; the first match wins
        excluded_emails: Author email substrings left out of the credits
    """

    default_type: CommitType = CommitType.PATCH
    case_sensitive: bool = False
    type_tokens: dict[str, tuple[str, ...]] = field(default_factory=dict)
    release_tokens: tuple[str, ...] = ()
    prerelease_tokens: tuple[str, ...] = ()
    branch_rules: tuple[BranchRule, ...] = ()
    excluded_emails: tuple[str, ...] = ("noreply.",)

    @classmethod
    def from_config(cls, config: FlexversConfig) -> Ruleset:
        """Compile a validated configuration.

        Raises:
            UnsupportedBranchPatternError: If a branch pattern is invalid
        """
        commits = config.commits
        return cls(
            default_type=commits.default,
            case_sensitive=commits.case_sensitive,
            type_tokens={key: tuple(tokens) for key, tokens in commits.map.items()},
            release_tokens=tuple(commits.release),
            prerelease_tokens=tuple(commits.prerelease),
            branch_rules=tuple(
                BranchRule.compile(branch.name, branch.prerelease, branch.increment)
                for branch in config.branches
            ),
            excluded_emails=tuple(config.contributors.exclude),
        )


def resolve_branch_rule(branch: str, ruleset: Ruleset) -> BranchRule | None:
    """Return the first branch rule matching ``branch``, if any."""
    for rule in ruleset.branch_rules:
        if rule.matches(branch):
            return rule
    return None
