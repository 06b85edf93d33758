"""Exception hierarchy for flexvers.

Library code raises these and never exits the process; the CLI turns
them into exit codes.
"""

from __future__ import annotations


class FlexversError(Exception):
    """Base class for all flexvers errors."""


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class ConfigError(FlexversError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """The configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """The configuration file is not valid JSON or violates the schema."""


class UnsupportedBranchPatternError(ConfigError):
    """A branch rule carries a pattern that is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid branch pattern {pattern!r}: {reason}")
        self.pattern = pattern


# -----------------------------------------------------------------------------
# Versions and commits
# -----------------------------------------------------------------------------


class MalformedVersionError(FlexversError):
    """A version string has a numeric segment without any digits."""

    def __init__(self, text: str, segment: str) -> None:
        super().__init__(f"Malformed version {text!r}: segment {segment!r} has no digits")
        self.text = text
        self.segment = segment


class CommitError(FlexversError):
    """A commit could not be processed.

    Attributes:
        sha: Identifier of the offending commit, when known
    """

    def __init__(self, message: str, sha: str | None = None) -> None:
        super().__init__(message)
        self.sha = sha


class MalformedCommitError(CommitError):
    """The commit message is empty or has no token to classify."""


class NonFormattedCommitError(CommitError):
    """The commit message does not follow the conventional header format."""


class TaggedCommitError(CommitError):
    """A commit that already carries a tag was handed to the release walk.

    Callers must truncate history at the most recent tag first.
    """


# -----------------------------------------------------------------------------
# Collaborators
# -----------------------------------------------------------------------------


class GitError(FlexversError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}\n{self.stderr.strip()}"
        return base


class PublishError(FlexversError):
    """Publishing a release to the hosting service failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
