"""Tests for the command line interface."""

from __future__ import annotations

import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from flexvers import __version__
from flexvers.cli import app

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "release" in result.output
    assert "preview" in result.output


@requires_git
class TestPreview:
    """Tests for the preview command."""

    def test_raw_changelog(self, temp_git_repo: Path, commit_to):
        commit_to(temp_git_repo, "fix: y", author="Ann <ann@test.com>")
        commit_to(temp_git_repo, "feat(release): add x", author="Bob <bob@test.com>")

        result = runner.invoke(app, ["preview", "-r", str(temp_git_repo), "--raw"])

        assert result.exit_code == 0, result.output
        assert "# Release 0.1.0" in result.output
        assert "* fix: y" in result.output
        assert "* feat(release): add x" in result.output
        assert "* Ann <ann@test.com>" in result.output

    def test_nothing_to_release(self, temp_git_repo: Path, commit_to):
        commit_to(temp_git_repo, "fix: y")

        result = runner.invoke(app, ["preview", "-r", str(temp_git_repo)])

        assert result.exit_code == 0
        assert "No releasable commits" in result.output

    def test_missing_config(self, temp_git_repo: Path):
        result = runner.invoke(app, ["preview", "-r", str(temp_git_repo), "-i", "missing.json"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_non_formatted_with_exit_on_error(self, temp_git_repo: Path, commit_to):
        commit_to(temp_git_repo, "Updated things")

        result = runner.invoke(app, ["preview", "-r", str(temp_git_repo), "--exit-on-error"])

        assert result.exit_code == 1

    def test_force_prerelease(self, temp_git_repo: Path, commit_to):
        commit_to(temp_git_repo, "fix: y")

        result = runner.invoke(
            app, ["preview", "-r", str(temp_git_repo), "--raw", "--force-prerelease"]
        )

        assert result.exit_code == 0, result.output
        assert "# Pre-Release 0.0.1" in result.output


@requires_git
class TestRelease:
    """Tests for the release command."""

    def test_dry_run(self, temp_git_repo: Path, commit_to, git):
        git(temp_git_repo, "remote", "add", "origin", "git@github.com:octo/widgets.git")
        commit_to(temp_git_repo, "feat!: breaking change")

        result = runner.invoke(app, ["release", "-r", str(temp_git_repo), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "DRY-RUN" in result.output
        assert "1.0.0" in result.output
        assert git(temp_git_repo, "tag", "-l") == ""

    def test_nothing_to_release(self, temp_git_repo: Path):
        result = runner.invoke(app, ["release", "-r", str(temp_git_repo), "--dry-run"])

        assert result.exit_code == 0
        assert "Nothing to do" in result.output

    def test_publishing_needs_token(self, temp_git_repo: Path, commit_to, git, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
        git(temp_git_repo, "remote", "add", "origin", "git@github.com:octo/widgets.git")
        commit_to(temp_git_repo, "feat(release): ship")

        result = runner.invoke(app, ["release", "-r", str(temp_git_repo)])

        assert result.exit_code == 1
        assert "GITHUB_TOKEN" in result.output

    def test_tags_and_publishes(self, temp_git_repo: Path, commit_to, git):
        git(temp_git_repo, "remote", "add", "origin", "git@github.com:octo/widgets.git")
        sha = commit_to(temp_git_repo, "feat(release): ship")

        with (
            patch("flexvers.vcs.git.GitRepository.push_tag") as push_tag,
            patch("flexvers.forge.github.GitHubPublisher.create_release") as create_release,
            patch("flexvers.forge.github.GitHubPublisher.close") as close,
        ):
            result = runner.invoke(
                app, ["release", "-r", str(temp_git_repo), "--github-token", "tok"]
            )

        assert result.exit_code == 0, result.output
        assert git(temp_git_repo, "rev-parse", "0.1.0^{commit}") == sha
        push_tag.assert_called_once_with("0.1.0", "origin")
        release, body = create_release.call_args.args
        assert release.tag_name == "0.1.0"
        assert body.startswith("# Release 0.1.0")
        close.assert_called_once()

    def test_unknown_forge_only_tags(self, temp_git_repo: Path, commit_to, git):
        git(temp_git_repo, "remote", "add", "origin", "https://git.example.com/octo/widgets.git")
        commit_to(temp_git_repo, "feat(release): ship")

        with (
            patch("flexvers.vcs.git.GitRepository.push_tag"),
            patch("flexvers.forge.github.GitHubPublisher.create_release") as create_release,
        ):
            result = runner.invoke(app, ["release", "-r", str(temp_git_repo)])

        assert result.exit_code == 0, result.output
        assert git(temp_git_repo, "tag", "-l") == "0.1.0"
        create_release.assert_not_called()
