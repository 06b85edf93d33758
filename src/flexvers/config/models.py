"""Pydantic models for the ``.semver.json`` configuration file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flexvers.core.version import CommitType

DEFAULT_CONFIG_FILE = ".semver.json"


def _default_type_map() -> dict[str, list[str]]:
    return {
        "MAJOR": ["breaking", "major"],
        "MINOR": ["feat"],
        "PATCH": ["fix", "perf", "refactor", "docs", "chore", "build", "ci", "style", "test"],
    }


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CommitsConfig(_Model):
    """How commit messages map onto version increments.

    Attributes:
        default: Commit type used when no token matches
        case_sensitive: Match tokens by exact, case-sensitive equality instead
            of case-insensitive containment
        release: Scope tokens that trigger a release, written as ``type(token):``
        prerelease: Scope tokens that trigger a pre-release
        map: Commit type name to the list of tokens selecting it
    """

    default: CommitType = CommitType.PATCH
    case_sensitive: bool = Field(default=False, alias="caseSensitive")
    release: list[str] = Field(default_factory=lambda: ["release"])
    prerelease: list[str] = Field(default_factory=lambda: ["prerelease"])
    map: dict[str, list[str]] = Field(default_factory=_default_type_map)

    @field_validator("default", mode="before")
    @classmethod
    def _parse_default(cls, value: Any) -> CommitType:
        if isinstance(value, CommitType):
            return value
        return CommitType.from_name(str(value))


class BranchConfig(_Model):
    """Per-branch override.

    Attributes:
        name: Regular expression matched against the branch name
        prerelease: Turn every release cut on this branch into a pre-release
        increment: Commit types allowed to cut a release on this branch
    """

    name: str
    prerelease: bool | None = None
    increment: list[CommitType] | None = None

    @field_validator("increment", mode="before")
    @classmethod
    def _parse_increment(cls, value: Any) -> Any:
        if value is None:
            return None
        return [str(item).strip().upper() for item in value]


class RepositoryConfig(_Model):
    enabled: bool = False


class TaggingConfig(_Model):
    supported_repositories: dict[str, RepositoryConfig] = Field(default_factory=dict)

    def is_enabled(self, forge: str) -> bool:
        """Whether releases should be published to the given forge."""
        repository = self.supported_repositories.get(forge)
        return repository is not None and repository.enabled


class ContributorsConfig(_Model):
    """Credits section settings.

    Attributes:
        exclude: Substrings; authors whose email contains any of them are
            left out of the credits (anonymized no-reply addresses)
    """

    exclude: list[str] = Field(default_factory=lambda: ["noreply."])


class FlexversConfig(_Model):
    """Root configuration model."""

    tagging: TaggingConfig = Field(default_factory=TaggingConfig)
    branches: list[BranchConfig] = Field(default_factory=list)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    contributors: ContributorsConfig = Field(default_factory=ContributorsConfig)
