"""Release boundary detection.

Walks the commits made since the last tag, oldest first, and decides
where releases are cut. Every commit is classified and accumulated into
the pending changelog; a commit that triggers a release closes the
pending changes into a :class:`Release` carrying the version reached at
that commit.

A commit triggers a release when:

- it is the newest commit and a release or pre-release is forced,
- its type token carries a release or pre-release scope, e.g.
  ``feat(release): ...``,
- or it is a MAJOR change.

Branch rules can then turn the release into a pre-release, and a rule
listing commit types decides on its own which commits cut a release on
that branch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from flexvers.core.commits import ClassifiedCommit, classify_commit
from flexvers.core.rules import resolve_branch_rule
from flexvers.core.version import CommitType, ReleaseKind, SemanticVersion
from flexvers.exceptions import (
    MalformedCommitError,
    NonFormattedCommitError,
    TaggedCommitError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flexvers.core.rules import BranchRule, Ruleset
    from flexvers.vcs.git import Commit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyFlags:
    """Caller policy for a release walk.

    Attributes:
        force_release: Cut a release at the newest commit regardless of its message
        force_prerelease: Cut a pre-release at the newest commit
        dry_run: Compute everything but skip side effects (honoured by callers)
        always_increment: Bump the version on every commit, not only on release cuts
        skip_non_formatted: Drop commits that don't follow the conventional format
        exit_on_error: Raise instead of continuing on commit errors
    """

    force_release: bool = False
    force_prerelease: bool = False
    dry_run: bool = False
    always_increment: bool = False
    skip_non_formatted: bool = False
    exit_on_error: bool = False


@dataclass(frozen=True)
class Contributor:
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class Release:
    """A release cut at a single commit.

    Attributes:
        commit: Identifier of the commit that receives the tag
        kind: Release or pre-release
        version: Version snapshot at the cut
        majors: Messages of MAJOR commits, oldest first
        minors: Messages of MINOR commits, oldest first
        patches: Messages of PATCH commits, oldest first
        contributors: Credited authors, in order of first appearance
    """

    commit: str
    kind: ReleaseKind
    version: SemanticVersion
    majors: tuple[str, ...] = ()
    minors: tuple[str, ...] = ()
    patches: tuple[str, ...] = ()
    contributors: tuple[Contributor, ...] = ()

    @property
    def tag_name(self) -> str:
        return self.version.format()

    @property
    def is_prerelease(self) -> bool:
        return self.kind is ReleaseKind.PRERELEASE


@dataclass
class _PendingChanges:
    """Changes accumulated since the previous release cut."""

    majors: list[str] = field(default_factory=list)
    minors: list[str] = field(default_factory=list)
    patches: list[str] = field(default_factory=list)
    contributors: list[Contributor] = field(default_factory=list)

    def add_message(self, commit_type: CommitType, message: str) -> None:
        if commit_type is CommitType.MAJOR:
            self.majors.append(message)
        elif commit_type is CommitType.MINOR:
            self.minors.append(message)
        else:
            self.patches.append(message)

    def add_contributor(self, name: str, email: str) -> None:
        if not any(contributor.email == email for contributor in self.contributors):
            self.contributors.append(Contributor(name=name, email=email))

    def close(self, commit: str, kind: ReleaseKind, version: SemanticVersion) -> Release:
        release = Release(
            commit=commit,
            kind=kind,
            version=version.copy(),
            majors=tuple(self.majors),
            minors=tuple(self.minors),
            patches=tuple(self.patches),
            contributors=tuple(self.contributors),
        )
        self.majors.clear()
        self.minors.clear()
        self.patches.clear()
        self.contributors.clear()
        return release


class ReleaseBuilder:
    """Stateful walk turning a commit sequence into releases.

    Args:
        ruleset: Classification and branch rules
        branch: Name of the branch being released
        seed: Version of the most recent tag, or the zero version
        flags: Caller policy
    """

    def __init__(
        self,
        ruleset: Ruleset,
        branch: str,
        seed: SemanticVersion | None = None,
        flags: PolicyFlags | None = None,
    ) -> None:
        self.ruleset = ruleset
        self.branch = branch
        self.seed = seed.copy() if seed is not None else SemanticVersion()
        self.flags = flags or PolicyFlags()
        self.branch_rule: BranchRule | None = resolve_branch_rule(branch, ruleset)
        if self.branch_rule is not None:
            logger.debug("Branch %s matches rule %s", branch, self.branch_rule.pattern.pattern)

    def build(self, commits: Sequence[Commit]) -> list[Release]:
        """Walk ``commits`` (oldest first) and return the releases cut.

        Raises:
            TaggedCommitError: If a commit in the sequence is already tagged
            MalformedCommitError: On an empty message under ``exit_on_error``
            NonFormattedCommitError: On a non-conventional message under
                ``exit_on_error`` without ``skip_non_formatted``
        """
        releases: list[Release] = []
        current: Release | None = None
        version = self.seed.copy()
        pending = _PendingChanges()
        newest = len(commits) - 1

        logger.info("Walking %d commit(s) on %s from version %s", len(commits), self.branch, version)

        for index, commit in enumerate(commits):
            if commit.tags:
                logger.error(
                    "Commit: [TAGGED: %s] %s - %s - %s",
                    ", ".join(commit.tags),
                    commit.sha,
                    commit.author_name,
                    commit.summary,
                )
                raise TaggedCommitError(
                    f"Commit {commit.sha} is already tagged ({', '.join(commit.tags)}); "
                    "history must be truncated at the most recent tag",
                    sha=commit.sha,
                )

            classified = self._classify(commit)
            if classified is None:
                continue

            kind = self._release_kind(classified, is_newest=index == newest)
            can_increment = kind is not ReleaseKind.NONE

            rule = self.branch_rule
            if rule is not None:
                if rule.allowed_types is not None:
                    can_increment = classified.commit_type in rule.allowed_types
                if can_increment and kind is ReleaseKind.NONE:
                    kind = ReleaseKind.RELEASE
                if rule.prerelease and can_increment:
                    kind = ReleaseKind.PRERELEASE

            pending.add_message(classified.commit_type, commit.message)
            if not self._is_excluded(commit.author_email):
                pending.add_contributor(commit.author_name, commit.author_email)

            if can_increment or self.flags.always_increment:
                version.increment(classified.commit_type)

            if can_increment:
                if current is not None:
                    releases.append(current)
                current = pending.close(commit.sha, kind, version)
                logger.debug("Cut %s %s at %s", kind, current.tag_name, commit.sha)

            logger.info(
                "Commit: [%s] %s%s - %s - %s",
                classified.commit_type,
                "[TAGGING] " if can_increment else "",
                commit.sha,
                commit.author_name,
                commit.summary,
            )

        if current is not None:
            releases.append(current)

        logger.info("Releases: %d", len(releases))
        return releases

    def _classify(self, commit: Commit) -> ClassifiedCommit | None:
        """Classify a commit, applying the error policy.

        Returns None when the commit is to be skipped.
        """
        try:
            classified = classify_commit(commit.message, self.ruleset)
        except MalformedCommitError as e:
            if self.flags.exit_on_error:
                logger.error("Commit: [ERROR: MALFORMED] %s - %s", commit.sha, commit.author_name)
                raise MalformedCommitError(
                    f"Commit {commit.sha} has an empty message", sha=commit.sha
                ) from e
            logger.warning("Commit: [MALFORMED] %s - %s - skipped", commit.sha, commit.author_name)
            return None

        if classified.follows_format:
            return classified

        if self.flags.skip_non_formatted:
            logger.warning(
                "Commit: [NON-FORMATTED] %s - %s - %s",
                commit.sha,
                commit.author_name,
                commit.summary,
            )
            return None

        if self.flags.exit_on_error:
            logger.error(
                "Commit: [ERROR: NON-FORMATTED] %s - %s - %s",
                commit.sha,
                commit.author_name,
                commit.summary,
            )
            raise NonFormattedCommitError(
                f"Commit {commit.sha} does not follow the conventional commit format: "
                f"{commit.summary!r}",
                sha=commit.sha,
            )

        logger.warning(
            "Commit: [NON-FORMATTED] %s - %s - %s - classified as %s",
            commit.sha,
            commit.author_name,
            commit.summary,
            classified.commit_type,
        )
        return classified

    def _release_kind(self, classified: ClassifiedCommit, *, is_newest: bool) -> ReleaseKind:
        kind = ReleaseKind.NONE
        if is_newest and self.flags.force_release:
            kind = ReleaseKind.RELEASE
        elif is_newest and self.flags.force_prerelease:
            kind = ReleaseKind.PRERELEASE

        if (
            classified.has_scope_token(self.ruleset.release_tokens)
            or classified.commit_type is CommitType.MAJOR
        ):
            kind = ReleaseKind.RELEASE
        if classified.has_scope_token(self.ruleset.prerelease_tokens):
            kind = ReleaseKind.PRERELEASE
        return kind

    def _is_excluded(self, email: str) -> bool:
        return any(pattern in email for pattern in self.ruleset.excluded_emails)


def build_releases(
    commits: Sequence[Commit],
    ruleset: Ruleset,
    branch: str,
    seed: SemanticVersion | None = None,
    flags: PolicyFlags | None = None,
) -> list[Release]:
    """Compute the releases for ``commits``.

    Convenience wrapper around :class:`ReleaseBuilder`.
    """
    return ReleaseBuilder(ruleset, branch, seed, flags).build(commits)
