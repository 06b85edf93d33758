"""Command-line entry point."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from flexvers import __title__, __version__
from flexvers.core import PolicyFlags
from flexvers.vcs import GitCredentials

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name=__title__,
    help="Semantic versioning from conventional commits: tag releases and publish them.",
    no_args_is_help=True,
)

InputFile = Annotated[
    str,
    typer.Option("--input-file", "-i", help="Path to the configuration file. Supports: .json"),
]
Repository = Annotated[
    str,
    typer.Option("--repository", "-r", help="Directory of the targeted repository."),
]
ForceRelease = Annotated[
    bool,
    typer.Option("--force-release", help="Force the latest commit to be a release."),
]
ForcePrerelease = Annotated[
    bool,
    typer.Option("--force-prerelease", help="Force the latest commit to be a pre-release."),
]
AlwaysIncrement = Annotated[
    bool,
    typer.Option(
        "--always-increment",
        help="Increment on every commit, even without a release. Skips versions in tags.",
    ),
]
SkipNonFormatted = Annotated[
    bool,
    typer.Option(
        "--skip-non-formatted",
        help="Leave out commits that don't follow the conventional commit format.",
    ),
]
ExitOnError = Annotated[
    bool,
    typer.Option("--exit-on-error/--no-exit-on-error", help="Exit with an error code on any error."),
]


def configure_logging(verbose: bool) -> None:
    """Route the package loggers through rich on stderr."""
    logger = logging.getLogger(__title__)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__title__} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version."),
    ] = False,
) -> None:
    configure_logging(verbose)


@app.command()
def release(
    input_file: InputFile = ".semver.json",
    repository: Repository = ".",
    override_repository_type: Annotated[
        str | None,
        typer.Option(help="Override the repository type, e.g. github."),
    ] = None,
    force_release: ForceRelease = False,
    force_prerelease: ForcePrerelease = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Do not act on anything, but give the outcome if it would."),
    ] = False,
    always_increment: AlwaysIncrement = False,
    skip_non_formatted: SkipNonFormatted = False,
    exit_on_error: ExitOnError = True,
    credentials: Annotated[
        Path | None,
        typer.Option("--credentials", "-c", help="Private SSH key used to push tags."),
    ] = None,
    github_token: Annotated[
        str | None,
        typer.Option(envvar="GITHUB_TOKEN", help="Token used to push tags and publish releases."),
    ] = None,
    github_repository: Annotated[
        str | None,
        typer.Option(envvar="GITHUB_REPOSITORY", help="owner/repo to publish releases to."),
    ] = None,
    remote: Annotated[str, typer.Option(help="Remote receiving the tags.")] = "origin",
) -> None:
    """Tag the releases found since the last tag and publish them."""
    from flexvers.cli.commands.release import run_release

    flags = PolicyFlags(
        force_release=force_release,
        force_prerelease=force_prerelease,
        dry_run=dry_run,
        always_increment=always_increment,
        skip_non_formatted=skip_non_formatted,
        exit_on_error=exit_on_error,
    )
    run_release(
        repository,
        input_file,
        flags,
        console,
        err_console,
        override_repository_type=override_repository_type,
        credentials=GitCredentials(ssh_key_path=credentials, token=github_token),
        github_token=github_token,
        github_repository=github_repository,
        remote=remote,
    )


@app.command()
def preview(
    input_file: InputFile = ".semver.json",
    repository: Repository = ".",
    force_release: ForceRelease = False,
    force_prerelease: ForcePrerelease = False,
    always_increment: AlwaysIncrement = False,
    skip_non_formatted: SkipNonFormatted = False,
    exit_on_error: ExitOnError = False,
    raw: Annotated[bool, typer.Option("--raw", help="Print plain Markdown.")] = False,
) -> None:
    """Show the releases and changelogs that would be created."""
    from flexvers.cli.commands.preview import run_preview

    flags = PolicyFlags(
        force_release=force_release,
        force_prerelease=force_prerelease,
        dry_run=True,
        always_increment=always_increment,
        skip_non_formatted=skip_non_formatted,
        exit_on_error=exit_on_error,
    )
    run_preview(repository, input_file, flags, console, err_console, raw=raw)


if __name__ == "__main__":
    app()
