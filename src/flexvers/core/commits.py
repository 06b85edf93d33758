"""Conventional commit classification.

Maps a commit message onto the semantic-versioning component it affects.
A message follows the format when its header looks like::

    <type words>[(<scope>)][!]: <description>

The whole header up to and including the colon is the *type token*; it
keeps the scope so that release triggers such as ``feat(release):`` can
be detected. Messages that don't follow the format fall back to their
first word.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flexvers.core.version import CommitType
from flexvers.exceptions import MalformedCommitError

if TYPE_CHECKING:
    from flexvers.core.rules import Ruleset

HEADER_PATTERN = re.compile(
    r"^(?P<type>[a-zA-Z]+(?:\s+[a-zA-Z]+)*\s*)"
    r"(?P<scope>\([\w\-./ ]+\))?"
    r"(?P<breaking>!?)"
    r":"
)

_TYPE_END = re.compile(r"[(!:]")


@dataclass(frozen=True)
class ClassifiedCommit:
    """Result of classifying one commit message.

    Attributes:
        token: Type token the classification was based on
        commit_type: Resolved commit type
        follows_format: Whether the header matched the conventional format
        is_breaking: Whether the header carried the ``!`` marker
    """

    token: str
    commit_type: CommitType
    follows_format: bool
    is_breaking: bool = False

    def has_scope_token(self, tokens: tuple[str, ...] | list[str]) -> bool:
        """Whether the type token contains any of ``tokens`` as ``(token)``."""
        return any(f"({token})" in self.token for token in tokens)


def extract_type_token(message: str) -> tuple[str, bool, bool]:
    """Split a commit message into its type token and format flags.

    Args:
        message: Full commit message

    Returns:
        Tuple of (type token, follows format, is breaking)

    Raises:
        MalformedCommitError: If the message has no token at all
    """
    match = HEADER_PATTERN.match(message)
    if match:
        return match.group(0), True, match.group("breaking") == "!"

    words = message.split()
    if not words:
        raise MalformedCommitError("Commit message is empty")
    return words[0], False, False


def bare_type(token: str) -> str:
    """Strip scope, breaking marker and colon from a type token."""
    return _TYPE_END.split(token, maxsplit=1)[0].strip()


def token_matches(token: str, candidate: str, case_sensitive: bool) -> bool:
    """Match a configured token against a type token.

    Case-sensitive matching compares the bare type for equality; otherwise
    the candidate only has to occur somewhere in the type token, ignoring case.
    """
    if case_sensitive:
        return bare_type(token) == candidate
    return candidate.lower() in token.lower()


def resolve_commit_type(token: str, ruleset: Ruleset) -> CommitType:
    """Look up the commit type for a type token.

    Entries of the token map are scanned in order and the first entry with
    a matching token wins. Keys that don't name a commit type fall back to
    the ruleset default, as does a token nothing matches.
    """
    for key, candidates in ruleset.type_tokens.items():
        if any(token_matches(token, candidate, ruleset.case_sensitive) for candidate in candidates):
            return CommitType.from_name(key, default=ruleset.default_type)
    return ruleset.default_type


def classify_commit(message: str, ruleset: Ruleset) -> ClassifiedCommit:
    """Classify a commit message.

    A breaking marker always yields MAJOR, whatever the token maps to.

    Args:
        message: Full commit message
        ruleset: Rules to classify with

    Returns:
        ClassifiedCommit for the message

    Raises:
        MalformedCommitError: If the message is empty or whitespace only
    """
    token, follows_format, is_breaking = extract_type_token(message)
    commit_type = CommitType.MAJOR if is_breaking else resolve_commit_type(token, ruleset)
    return ClassifiedCommit(
        token=token,
        commit_type=commit_type,
        follows_format=follows_format,
        is_breaking=is_breaking,
    )
