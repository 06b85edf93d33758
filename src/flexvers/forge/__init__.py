"""Hosting service integrations."""

from __future__ import annotations

from flexvers.forge.github import GitHubConfig, GitHubPublisher, parse_github_repository

FORGE_HOSTS = {
    "github.com": "github",
}


def detect_forge(remote_url: str) -> str | None:
    """Return the forge type serving ``remote_url``, if supported."""
    for host, forge in FORGE_HOSTS.items():
        if host in remote_url:
            return forge
    return None


__all__ = [
    "FORGE_HOSTS",
    "GitHubConfig",
    "GitHubPublisher",
    "detect_forge",
    "parse_github_repository",
]
