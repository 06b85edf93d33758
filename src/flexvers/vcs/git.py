"""Git repository access through the ``git`` command line.

Provides the commit history the release walk consumes and the tag
operations used to mark releases. Every call runs ``git`` as a
subprocess in the repository directory; credentials are passed to that
subprocess only.
"""

from __future__ import annotations

import base64
import logging
import os
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from flexvers.core.version import SemanticVersion
from flexvers.exceptions import GitError, MalformedVersionError

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"%H{_FIELD_SEP}%an{_FIELD_SEP}%ae{_FIELD_SEP}%aI{_FIELD_SEP}%B{_RECORD_SEP}"
_TAG_FORMAT = "%(refname:short)%09%(objectname)%09%(*objectname)"


def _parse_version_tags(names) -> list[tuple[SemanticVersion, str]]:
    """Pair each tag that reads as a version with its parsed value."""
    versions = []
    for name in names:
        try:
            versions.append((SemanticVersion.parse(name), name))
        except MalformedVersionError:
            logger.debug("Ignoring non-version tag: %s", name)
    return versions


@dataclass(frozen=True)
class Commit:
    """A single commit, as read from history.

    Attributes:
        sha: Full commit hash
        message: Commit message without trailing whitespace
        author_name: Author name
        author_email: Author email
        date: Author date
        tags: Names of the version tags pointing at this commit
    """

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime | None = None
    tags: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class GitCredentials:
    """Credentials for talking to the remote.

    Attributes:
        ssh_key_path: Private key used for SSH remotes
        username: User for HTTPS remotes
        token: Token or password for HTTPS remotes
    """

    ssh_key_path: Path | None = None
    username: str | None = None
    token: str | None = None


@dataclass(frozen=True)
class History:
    """Commits made since the most recent tag on the current branch.

    Attributes:
        branch: Checked-out branch name
        seed: Version parsed from the most recent tag, or 0.0.0
        commits: Untagged commits after that tag, oldest first
        latest_tag: Name of the most recent tag, if any
    """

    branch: str
    seed: SemanticVersion
    commits: list[Commit] = field(default_factory=list)
    latest_tag: str | None = None


class GitRepository:
    """Git repository wrapper.

    Args:
        path: Repository working directory
        credentials: Optional credentials used for pushes

    Raises:
        GitError: If ``path`` is not a git work tree or is a bare repository
    """

    def __init__(self, path: Path, credentials: GitCredentials | None = None) -> None:
        self.path = Path(path)
        self.credentials = credentials or GitCredentials()

        if self._run("rev-parse", "--is-bare-repository") == "true":
            raise GitError(f"Repository is bare: {self.path}")

    def _env(self) -> dict[str, str] | None:
        key = self.credentials.ssh_key_path
        if key is None:
            return None
        env = dict(os.environ)
        env["GIT_SSH_COMMAND"] = f'ssh -i "{key}" -o IdentitiesOnly=yes'
        return env

    def _auth_args(self) -> list[str]:
        if not self.credentials.token:
            return []
        user = self.credentials.username or "x-access-token"
        basic = base64.b64encode(f"{user}:{self.credentials.token}".encode()).decode()
        return ["-c", f"http.extraHeader=Authorization: Basic {basic}"]

    def _run(
        self,
        *args: str,
        env: dict[str, str] | None = None,
        prefix: list[str] | None = None,
    ) -> str:
        """Run a git command and return its stripped stdout.

        Raises:
            GitError: If git is missing or the command fails
        """
        cmd = ["git", *(prefix or []), *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                check=True,
                env=env,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout.strip()

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD")

    def get_tags(self) -> dict[str, list[str]]:
        """Map commit hashes to the names of the tags pointing at them.

        Annotated tags are peeled to their commit.
        """
        output = self._run("for-each-ref", "refs/tags", f"--format={_TAG_FORMAT}")
        tags: dict[str, list[str]] = {}
        for line in output.splitlines():
            if not line.strip():
                continue
            name, object_sha, peeled_sha = (line.split("\t") + ["", ""])[:3]
            tags.setdefault(peeled_sha or object_sha, []).append(name)
        return tags

    def get_commits(self, since: str | None = None) -> list[Commit]:
        """Return commits reachable from HEAD, oldest first.

        Args:
            since: Exclude this commit and its ancestors

        Returns:
            Commits with their version tags attached
        """
        revision = f"{since}..HEAD" if since else "HEAD"
        output = self._run("log", "--reverse", f"--format={_LOG_FORMAT}", revision)
        tags = self.get_tags()

        commits: list[Commit] = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, date, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.rstrip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(date) if date else None,
                    tags=tuple(name for _, name in _parse_version_tags(tags.get(sha, ()))),
                )
            )
        return commits

    def get_latest_tag(self) -> tuple[str, str] | None:
        """Find the most recent tagged commit in HEAD's history.

        Tags that aren't versions, such as ``latest``, are ignored. When
        several version tags point at a commit, the highest one wins.

        Returns:
            Tuple of (commit hash, tag name), or None without version tags
        """
        tags = self.get_tags()
        if not tags:
            return None

        history = self._run("rev-list", "HEAD").splitlines()
        for sha in history:
            versions = _parse_version_tags(tags.get(sha, ()))
            if versions:
                return sha, max(versions, key=lambda item: item[0])[1]
        return None

    def read_history(self) -> History:
        """Collect everything the release walk needs.

        Returns:
            History since the most recent tag on the current branch
        """
        branch = self.current_branch()
        latest = self.get_latest_tag()

        if latest is None:
            logger.info("No tags found; starting from 0.0.0")
            return History(branch=branch, seed=SemanticVersion(), commits=self.get_commits())

        sha, name = latest
        logger.debug("Last Tag: %s - %s", sha, name)
        return History(
            branch=branch,
            seed=SemanticVersion.parse(name),
            commits=self.get_commits(since=sha),
            latest_tag=name,
        )

    # -------------------------------------------------------------------------
    # Tags and remotes
    # -------------------------------------------------------------------------

    def create_tag(
        self,
        name: str,
        sha: str,
        message: str,
        *,
        tagger_name: str | None = None,
        tagger_email: str | None = None,
    ) -> None:
        """Create (or replace) an annotated tag.

        The message is stored verbatim so Markdown headings survive.
        """
        env = self._env()
        if tagger_name and tagger_email:
            env = dict(env if env is not None else os.environ)
            env["GIT_COMMITTER_NAME"] = tagger_name
            env["GIT_COMMITTER_EMAIL"] = tagger_email
        self._run("tag", "-a", "-f", "--cleanup=verbatim", "-m", message, name, sha, env=env)

    def delete_tag(self, name: str) -> None:
        self._run("tag", "-d", name)

    def push_tag(self, name: str, remote: str = "origin") -> None:
        """Push a tag to ``remote``.

        The local tag is deleted when the push fails.

        Raises:
            GitError: If the push fails
        """
        try:
            self._run(
                "push",
                remote,
                f"refs/tags/{name}",
                env=self._env(),
                prefix=self._auth_args(),
            )
        except GitError:
            logger.error("Failed to push Tag: %s", name)
            self.delete_tag(name)
            raise

    def get_remote_url(self, remote: str = "origin") -> str:
        return self._run("remote", "get-url", remote)
