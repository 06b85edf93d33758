"""Configuration management for flexvers."""

from __future__ import annotations

from flexvers.config.loader import load_config
from flexvers.config.models import (
    BranchConfig,
    CommitsConfig,
    ContributorsConfig,
    FlexversConfig,
    RepositoryConfig,
    TaggingConfig,
)

__all__ = [
    "BranchConfig",
    "CommitsConfig",
    "ContributorsConfig",
    "FlexversConfig",
    "RepositoryConfig",
    "TaggingConfig",
    "load_config",
]
