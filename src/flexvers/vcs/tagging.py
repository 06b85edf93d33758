"""Tagging of release commits."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flexvers.core.releases import Release
    from flexvers.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


def tag_release(
    repo: GitRepository,
    release: Release,
    changelog: str,
    *,
    commit: Commit | None = None,
    remote: str = "origin",
    dry_run: bool = False,
) -> str:
    """Create and push the tag for a release.

    The tag is named after the release version and annotated with the
    changelog. The author of the release commit is used as tagger when
    ``commit`` is given.

    Args:
        repo: Repository to tag
        release: Release to tag
        changelog: Tag annotation
        commit: The release commit, for the tagger identity
        remote: Remote to push to
        dry_run: Only log what would happen

    Returns:
        The tag name

    Raises:
        GitError: If creating or pushing the tag fails
    """
    name = release.tag_name
    logger.debug("Message:\n%s", changelog)

    if dry_run:
        logger.info("Dry Run: Tagging: %s for %s", name, release.commit)
        return name

    repo.create_tag(
        name,
        release.commit,
        changelog,
        tagger_name=commit.author_name if commit else None,
        tagger_email=commit.author_email if commit else None,
    )
    repo.push_tag(name, remote)
    logger.info("Pushed Tag: %s for %s", name, release.commit)
    return name
