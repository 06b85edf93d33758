"""Semantic version model.

Versions are rendered as ``[prefix-]major.minor.patch[-suffix]``. The
prefix and suffix are cosmetic: equality and ordering only look at the
numeric core.
"""

from __future__ import annotations

import functools
import re
from enum import StrEnum

from flexvers.exceptions import MalformedVersionError

_NON_DIGITS = re.compile(r"\D")
_DOTTED_CORE = re.compile(r"[^\d.]*\d+(?:\.\d+)+")


class CommitType(StrEnum):
    """Semantic-versioning impact of a commit."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"

    @property
    def precedence(self) -> int:
        """Rank used to compare impacts (MAJOR > MINOR > PATCH)."""
        return _PRECEDENCE[self]

    @classmethod
    def from_name(cls, name: str, default: CommitType | None = None) -> CommitType:
        """Look up a commit type by name, case-insensitively.

        Args:
            name: Type name such as "major" or "Minor"
            default: Returned for unrecognized names; PATCH when omitted

        Returns:
            The matching CommitType
        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            return default if default is not None else cls.PATCH


_PRECEDENCE = {CommitType.PATCH: 0, CommitType.MINOR: 1, CommitType.MAJOR: 2}


class ReleaseKind(StrEnum):
    """Kind of release a boundary produces."""

    NONE = "none"
    RELEASE = "release"
    PRERELEASE = "prerelease"


@functools.total_ordering
class SemanticVersion:
    """A mutable semantic version.

    Increments happen in place during the release walk; use :meth:`copy`
    to take a snapshot that later increments will not affect.
    """

    __slots__ = ("major", "minor", "patch", "prefix", "suffix")

    def __init__(
        self,
        major: int = 0,
        minor: int = 0,
        patch: int = 0,
        prefix: str | None = None,
        suffix: str | None = None,
    ) -> None:
        if min(major, minor, patch) < 0:
            raise ValueError("Version components must not be negative")
        self.major = major
        self.minor = minor
        self.patch = patch
        self.prefix = prefix
        self.suffix = suffix

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version from a tag name.

        The text is split on ``-``. The numeric core is the first dotted
        part such as ``1.2.0`` or ``v1.2``, or else the first part containing
        a digit; parts before it form the prefix and parts after it form the
        suffix, so ``py3-1.2.0`` has the prefix ``py3``. Each core segment
        is read by dropping every non-digit character, so ``v1.2.3`` reads
        as 1.2.3 and formats without the ``v``. Missing segments default
        to 0.

        Args:
            text: Version or tag string, e.g. "release-1.4.0-beta"

        Returns:
            Parsed SemanticVersion

        Raises:
            MalformedVersionError: If a present core segment has no digits
        """
        parts = text.strip().split("-")
        core_index = next(
            (i for i, part in enumerate(parts) if _DOTTED_CORE.fullmatch(part)),
            None,
        )
        if core_index is None:
            core_index = next(
                (i for i, part in enumerate(parts) if any(ch.isdigit() for ch in part)),
                None,
            )
        if core_index is None:
            raise MalformedVersionError(text, text.strip())

        prefix = "-".join(parts[:core_index]) or None
        suffix = "-".join(parts[core_index + 1 :]) or None

        numbers: list[int] = []
        for segment in parts[core_index].split(".")[:3]:
            digits = _NON_DIGITS.sub("", segment)
            if not digits:
                raise MalformedVersionError(text, segment)
            numbers.append(int(digits))
        numbers.extend([0] * (3 - len(numbers)))

        return cls(*numbers, prefix=prefix, suffix=suffix)

    def increment(self, commit_type: CommitType) -> None:
        """Bump the version in place.

        A MAJOR bump resets minor and patch; a MINOR bump resets patch.
        """
        if commit_type is CommitType.MAJOR:
            self.major += 1
            self.minor = 0
            self.patch = 0
        elif commit_type is CommitType.MINOR:
            self.minor += 1
            self.patch = 0
        else:
            self.patch += 1

    def copy(self) -> SemanticVersion:
        return SemanticVersion(self.major, self.minor, self.patch, self.prefix, self.suffix)

    def format(self) -> str:
        """Render as ``[prefix-]major.minor.patch[-suffix]``."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prefix:
            text = f"{self.prefix}-{text}"
        if self.suffix:
            text = f"{text}-{self.suffix}"
        return text

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"SemanticVersion({self.format()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.core == other.core

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.core < other.core

    def __hash__(self) -> int:
        return hash(self.core)
