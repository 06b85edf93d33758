"""Changelog rendering.

Produces the Markdown text used as the annotation of a release tag and
as the body of a published release.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flexvers import __homepage__, __title__
from flexvers.core.version import ReleaseKind

if TYPE_CHECKING:
    from flexvers.core.releases import Release


def render_changelog(
    release: Release,
    *,
    tool_name: str = __title__,
    tool_url: str = __homepage__,
) -> str:
    """Render the changelog of a release.

    Sections appear in a fixed order: Major, Minor and Patch changes (each
    only when non-empty), then the credits and a trailer naming the tool.

    Args:
        release: Release to describe
        tool_name: Name shown in the trailer
        tool_url: Link shown in the trailer

    Returns:
        Markdown changelog
    """
    heading = "Pre-Release" if release.kind is ReleaseKind.PRERELEASE else "Release"
    lines = [f"# {heading} {release.tag_name}", ""]

    sections = (
        ("Major Changes", release.majors),
        ("Minor Changes", release.minors),
        ("Patch Changes", release.patches),
    )
    for title, messages in sections:
        if not messages:
            continue
        lines.append(f"## {title}:")
        lines.extend(f"* {message}" for message in messages)
        lines.append("")

    lines.append("## Credits:")
    lines.extend(f"* {contributor.name} <{contributor.email}>" for contributor in release.contributors)
    lines.append("")

    lines.append("---")
    lines.append(f"Generated by: [{tool_name}]({tool_url})")

    return "\n".join(lines)
