"""Steps shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from flexvers.config import load_config
from flexvers.core import Ruleset, build_releases
from flexvers.exceptions import FlexversError
from flexvers.vcs import GitCredentials, GitRepository, History

if TYPE_CHECKING:
    from rich.console import Console

    from flexvers.config import FlexversConfig
    from flexvers.core import PolicyFlags, Release


@dataclass
class ReleasePlan:
    """Everything computed before any side effect happens."""

    repo: GitRepository
    config: FlexversConfig
    history: History
    releases: list[Release]


def plan_releases(
    repository: str | None,
    input_file: str | None,
    flags: PolicyFlags,
    err_console: Console,
    credentials: GitCredentials | None = None,
) -> ReleasePlan:
    """Load configuration and history, then compute the releases.

    Args:
        repository: Repository directory; defaults to the current directory
        input_file: Configuration file, relative to the repository
        flags: Caller policy
        err_console: Console for error output
        credentials: Credentials for later pushes

    Raises:
        SystemExit: On any configuration, git or commit error
    """
    project_path = Path(repository) if repository else Path.cwd()

    try:
        config = load_config(Path(input_file) if input_file else None, project_path)
        ruleset = Ruleset.from_config(config)
        repo = GitRepository(project_path, credentials)
        history = repo.read_history()
        releases = build_releases(
            history.commits,
            ruleset,
            history.branch,
            history.seed,
            flags,
        )
    except FlexversError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    return ReleasePlan(repo=repo, config=config, history=history, releases=releases)
