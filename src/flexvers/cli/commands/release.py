"""Implementation of the 'release' command.

Tags every release computed from the commits since the last tag and
publishes it to the hosting service when that is enabled.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import TYPE_CHECKING

from rich.table import Table

from flexvers.cli.commands.common import plan_releases
from flexvers.core import render_changelog
from flexvers.exceptions import FlexversError, PublishError
from flexvers.forge import GitHubConfig, GitHubPublisher, detect_forge, parse_github_repository
from flexvers.vcs import GitCredentials, tag_release

if TYPE_CHECKING:
    from rich.console import Console

    from flexvers.core import PolicyFlags, Release

logger = logging.getLogger(__name__)


def run_release(
    repository: str | None,
    input_file: str | None,
    flags: PolicyFlags,
    console: Console,
    err_console: Console,
    *,
    override_repository_type: str | None = None,
    credentials: GitCredentials | None = None,
    github_token: str | None = None,
    github_repository: str | None = None,
    remote: str = "origin",
) -> None:
    """Run the release command.

    Args:
        repository: Repository directory
        input_file: Configuration file
        flags: Caller policy
        console: Console for standard output
        err_console: Console for error output
        override_repository_type: Forge type to use instead of detecting it
        credentials: Credentials for pushing tags
        github_token: Token for the GitHub API
        github_repository: ``owner/repo``; derived from the remote if omitted
        remote: Remote receiving the tags
    """
    plan = plan_releases(repository, input_file, flags, err_console, credentials)

    if not plan.releases:
        console.print("[yellow]No releasable commits found since the last tag. Nothing to do.[/]")
        return

    try:
        remote_url = plan.repo.get_remote_url(remote)
    except FlexversError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    forge = override_repository_type or detect_forge(remote_url)
    publisher = None
    if forge is None:
        logger.warning("Repository Type is not supported: %s; releases will only be tagged", remote_url)
    elif plan.config.tagging.is_enabled(forge) and not flags.dry_run:
        publisher = _create_publisher(forge, remote_url, github_token, github_repository, err_console)

    commits = {commit.sha: commit for commit in plan.history.commits}
    mode_str = "[yellow]DRY-RUN[/]" if flags.dry_run else "[green]EXECUTING[/]"
    console.print(f"\n{mode_str} - {len(plan.releases)} release(s) on [cyan]{plan.history.branch}[/]\n")

    with ExitStack() as stack:
        if publisher is not None:
            stack.enter_context(publisher)
        for release in plan.releases:
            changelog = render_changelog(release)
            try:
                tag_release(
                    plan.repo,
                    release,
                    changelog,
                    commit=commits.get(release.commit),
                    remote=remote,
                    dry_run=flags.dry_run,
                )
            except FlexversError as e:
                err_console.print(f"[red]Failed to tag {release.tag_name}:[/] {e}")
                if flags.exit_on_error:
                    raise SystemExit(1) from e
                continue

            if publisher is None:
                if flags.dry_run and forge is not None and plan.config.tagging.is_enabled(forge):
                    logger.info("Dry Run: Creating Release: %s", release.tag_name)
                continue

            try:
                publisher.create_release(release, changelog)
            except PublishError as e:
                logger.error("Failed to create release: %s", e)
                err_console.print(f"[red]Failed to publish {release.tag_name}:[/] {e}")
                if flags.exit_on_error:
                    raise SystemExit(1) from e

    console.print(_summary(plan.releases))


def _create_publisher(
    forge: str,
    remote_url: str,
    token: str | None,
    repository: str | None,
    err_console: Console,
) -> GitHubPublisher:
    if forge != "github":
        err_console.print(f"[red]Error:[/] Repository Type is not supported: {forge}")
        raise SystemExit(1)

    repository = repository or parse_github_repository(remote_url)
    if not token or not repository:
        err_console.print(
            "[red]Error:[/] Publishing to GitHub needs a token and a repository.\n"
            "Set [cyan]GITHUB_TOKEN[/] and [cyan]GITHUB_REPOSITORY[/] or pass "
            "[cyan]--github-token[/] and [cyan]--github-repository[/]."
        )
        raise SystemExit(1)

    try:
        return GitHubPublisher(GitHubConfig(token=token, repository=repository))
    except PublishError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


def _summary(releases: list[Release]) -> Table:
    table = Table(title="Releases")
    table.add_column("Version", style="green")
    table.add_column("Kind")
    table.add_column("Commit", style="cyan")
    table.add_column("Changes", justify="right")
    for release in releases:
        changes = len(release.majors) + len(release.minors) + len(release.patches)
        table.add_row(release.tag_name, str(release.kind), release.commit[:7], str(changes))
    return table
