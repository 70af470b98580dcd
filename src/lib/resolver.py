"""
Image path resolution

Qiita cannot serve images from the article repository, so local image paths
are rewritten to raw-content URLs of the GitHub repository. Resolution is an
injected capability: compilers receive an ImageResolver and never touch git
or the network themselves.

A failed resolution is not an error: the resolver returns the original path
with resolved=False and the compiler keeps it, logging a warning.
"""

import subprocess
from pathlib import Path
from typing import NamedTuple, Optional, Protocol

from .log import LOG, WARN


class Resolution(NamedTuple):
    """Result of resolving a local path"""
    url: str
    resolved: bool


class ImageResolver(Protocol):
    """Turns a local image path into an absolute URL"""

    def resolve(self, path: str) -> Resolution:
        ...


class GitRepositoryResolver:
    """
    Resolve image paths against a GitHub repository's default branch

    The branch is taken from the constructor when given, otherwise it is
    looked up once with `git remote show origin` (the "HEAD branch:" line).

    Example:
        >>> resolver = GitRepositoryResolver("octocat/articles", branch="main")
        >>> resolver.resolve("/images/cat.png")
        Resolution(url='https://raw.githubusercontent.com/octocat/articles/main/images/cat.png', resolved=True)
    """

    def __init__(
        self,
        repository: str,
        branch: Optional[str] = None,
        host: str = "https://raw.githubusercontent.com",
        cwd: Optional[Path] = None,
    ) -> None:
        self.repository = repository
        self.host = host.rstrip("/")
        self.cwd = cwd
        self.branch = branch
        self.branch_lookedUp = branch is not None

    @classmethod
    def from_settings(cls, settings, cwd: Optional[Path] = None) -> "GitRepositoryResolver":
        """Build a resolver from AppSettings"""
        return cls(
            repository=settings.repository,
            branch=settings.default_branch,
            host=settings.raw_content_host,
            cwd=cwd,
        )

    def resolve(self, path: str) -> Resolution:
        if not self.repository:
            WARN(f"No repository configured (Zeta.toml or ZETA_REPOSITORY); keeping {path}")
            return Resolution(path, False)

        branch = self.branch_get()
        if not branch:
            return Resolution(path, False)

        return Resolution(f"{self.host}/{self.repository}/{branch}{path}", True)

    def branch_get(self) -> Optional[str]:
        """Default branch of the origin remote, looked up at most once"""
        if not self.branch_lookedUp:
            self.branch = self.branch_lookup()
            self.branch_lookedUp = True
        return self.branch

    def branch_lookup(self) -> Optional[str]:
        """
        Ask git for the default branch of origin

        Returns:
            Branch name, or None (with a warning) if git is unavailable,
            the remote cannot be queried, or no HEAD branch is reported
        """
        try:
            result = subprocess.run(
                ["git", "remote", "show", "origin"],
                capture_output=True,
                text=True,
                cwd=self.cwd,
                check=False,
            )
        except OSError as error:
            WARN(f"Failed to run git: {error}")
            return None

        if result.returncode != 0:
            WARN(f"Failed to get remote origin: {result.stderr.strip()}")
            return None

        for line in result.stdout.splitlines():
            line = line.strip()
            if line.startswith("HEAD branch:"):
                branch = line.split(":", 1)[1].strip()
                if branch and branch != "(unknown)":
                    LOG(f"Default branch of origin: {branch}", level=2)
                    return branch

        WARN("Failed to get main branch of origin")
        return None
