"""Publishing releases to GitHub."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from flexvers import __title__, __version__
from flexvers.exceptions import PublishError

if TYPE_CHECKING:
    from flexvers.core.releases import Release

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# git@github.com:owner/repo.git, ssh://git@github.com/owner/repo, https://github.com/owner/repo.git
_REMOTE_PATTERN = re.compile(r"github\.com[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")


@dataclass(frozen=True)
class GitHubConfig:
    """Connection settings for the GitHub API.

    Attributes:
        token: Token with permission to create releases
        repository: Repository as ``owner/repo``
        api_url: API root, override for GitHub Enterprise
        timeout: Request timeout in seconds
    """

    token: str
    repository: str
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]


def parse_github_repository(remote_url: str) -> str | None:
    """Extract ``owner/repo`` from a GitHub remote URL."""
    match = _REMOTE_PATTERN.search(remote_url.strip())
    if match is None:
        return None
    return f"{match.group('owner')}/{match.group('repo')}"


class GitHubPublisher:
    """Creates GitHub releases for tagged commits.

    Args:
        config: Connection settings
        client: HTTP client to use; one is created from ``config`` if omitted
    """

    def __init__(self, config: GitHubConfig, client: httpx.Client | None = None) -> None:
        if "/" not in config.repository:
            raise PublishError(f"Repository must be given as owner/repo, got {config.repository!r}")
        self.config = config
        self._client = client or httpx.Client(
            base_url=config.api_url,
            timeout=config.timeout,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.token}",
            "User-Agent": f"{__title__}/{__version__}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubPublisher:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def create_release(self, release: Release, body: str) -> dict[str, Any]:
        """Create a release entry for an existing tag.

        Args:
            release: Release to publish
            body: Release notes

        Returns:
            The created release as returned by the API

        Raises:
            PublishError: If the request fails
        """
        name = release.tag_name
        payload = {
            "tag_name": name,
            "name": name,
            "body": body,
            "draft": False,
            "prerelease": release.is_prerelease,
            "target_commitish": release.commit,
        }
        url = f"/repos/{self.config.owner}/{self.config.repo}/releases"

        logger.info("Creating Release: %s", name)
        try:
            response = self._client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise PublishError(f"Failed to create release {name}: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            raise PublishError(
                f"Failed to create release {name}: {response.status_code} {detail}",
                status_code=response.status_code,
            )

        data = response.json()
        logger.info("Created Release: %s %s", name, data.get("html_url", ""))
        return data
