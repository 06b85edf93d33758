"""Unit tests for changelog rendering."""

from __future__ import annotations

from flexvers import __homepage__
from flexvers.core.changelog import render_changelog
from flexvers.core.releases import Contributor, Release
from flexvers.core.version import ReleaseKind, SemanticVersion


def _release(**overrides) -> Release:
    values = {
        "commit": "abc1234",
        "kind": ReleaseKind.RELEASE,
        "version": SemanticVersion(1, 2, 0),
        "majors": (),
        "minors": ("feat: add login",),
        "patches": ("fix: crash on start", "fix: typo"),
        "contributors": (Contributor("Ann", "ann@test.com"),),
    }
    values.update(overrides)
    return Release(**values)


class TestRenderChangelog:
    """Tests for render_changelog()."""

    def test_release_header(self):
        assert render_changelog(_release()).startswith("# Release 1.2.0\n")

    def test_prerelease_header(self):
        changelog = render_changelog(_release(kind=ReleaseKind.PRERELEASE))

        assert changelog.startswith("# Pre-Release 1.2.0\n")

    def test_empty_sections_omitted(self):
        """Sections without messages are left out."""
        changelog = render_changelog(_release())

        assert "## Major Changes" not in changelog
        assert "## Minor Changes:\n* feat: add login\n" in changelog
        assert "## Patch Changes:\n* fix: crash on start\n* fix: typo\n" in changelog

    def test_section_order(self):
        """Major, Minor, Patch, then Credits."""
        changelog = render_changelog(_release(majors=("feat!: drop py2",)))

        positions = [
            changelog.index("## Major Changes:"),
            changelog.index("## Minor Changes:"),
            changelog.index("## Patch Changes:"),
            changelog.index("## Credits:"),
        ]
        assert positions == sorted(positions)

    def test_credits(self):
        changelog = render_changelog(
            _release(contributors=(Contributor("Ann", "ann@test.com"), Contributor("Bob", "bob@x.io")))
        )

        assert "## Credits:\n* Ann <ann@test.com>\n* Bob <bob@x.io>\n" in changelog

    def test_credits_section_always_present(self):
        changelog = render_changelog(_release(contributors=()))

        assert "## Credits:" in changelog

    def test_trailer(self):
        """The changelog ends with the generator trailer."""
        changelog = render_changelog(_release())

        assert changelog.endswith(f"---\nGenerated by: [flexvers]({__homepage__})")

    def test_custom_trailer(self):
        changelog = render_changelog(_release(), tool_name="acme", tool_url="https://acme.test")

        assert changelog.endswith("Generated by: [acme](https://acme.test)")

    def test_full_layout(self):
        """Complete rendering of a small release."""
        release = _release(
            version=SemanticVersion(2, 0, 0, prefix="app"),
            majors=("fix!: breaking z",),
            minors=("feat: add x",),
            patches=("fix: y",),
        )

        assert render_changelog(release, tool_url="https://example.test") == (
            "# Release app-2.0.0\n"
            "\n"
            "## Major Changes:\n"
            "* fix!: breaking z\n"
            "\n"
            "## Minor Changes:\n"
            "* feat: add x\n"
            "\n"
            "## Patch Changes:\n"
            "* fix: y\n"
            "\n"
            "## Credits:\n"
            "* Ann <ann@test.com>\n"
            "\n"
            "---\n"
            "Generated by: [flexvers](https://example.test)"
        )
