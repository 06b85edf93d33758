"""Implementation of the 'preview' command.

Shows the releases and changelogs the commits since the last tag would
produce, without touching the repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markdown import Markdown
from rich.panel import Panel

from flexvers.cli.commands.common import plan_releases
from flexvers.core import render_changelog

if TYPE_CHECKING:
    from rich.console import Console

    from flexvers.core import PolicyFlags


def run_preview(
    repository: str | None,
    input_file: str | None,
    flags: PolicyFlags,
    console: Console,
    err_console: Console,
    *,
    raw: bool = False,
) -> None:
    """Run the preview command.

    Args:
        repository: Repository directory
        input_file: Configuration file
        flags: Caller policy
        console: Console for standard output
        err_console: Console for error output
        raw: Print plain Markdown instead of rendering it
    """
    plan = plan_releases(repository, input_file, flags, err_console)
    history = plan.history

    if not plan.releases:
        console.print(
            f"[yellow]No releasable commits among {len(history.commits)} commit(s) "
            f"since {history.latest_tag or 'the first commit'}.[/]"
        )
        return

    for release in plan.releases:
        changelog = render_changelog(release)
        if raw:
            console.print(changelog, markup=False, highlight=False, soft_wrap=True)
            console.print()
            continue
        console.print(
            Panel(
                Markdown(changelog),
                title=f"[green]{release.tag_name}[/] [dim]{release.commit[:7]}[/]",
                border_style="yellow" if release.is_prerelease else "green",
            )
        )
