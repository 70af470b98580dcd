"""
Image resolver tests

Tests default branch lookup through git and the fallbacks when it fails.
git is replaced by a stub so the tests do not depend on a repository.
"""

import subprocess

import pytest

from zeta.config.settings import AppSettings
from zeta.lib.resolver import GitRepositoryResolver, Resolution


REMOTE_SHOW = (
    "* remote origin\n"
    "  Fetch URL: git@github.com:octocat/articles.git\n"
    "  Push  URL: git@github.com:octocat/articles.git\n"
    "  HEAD branch: main\n"
    "  Remote branch:\n"
    "    main tracked\n"
)


@pytest.fixture
def git_stub(monkeypatch):
    """Replace subprocess.run; returns the list of recorded calls"""
    calls = []

    def stub(result):
        def run(args, **kwargs):
            calls.append(args)
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr("zeta.lib.resolver.subprocess.run", run)
        return calls

    return stub


def completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(
        ["git", "remote", "show", "origin"], returncode, stdout=stdout, stderr=stderr
    )


class TestResolve:
    """Test successful resolution"""

    def test_branch_from_git(self, git_stub):
        """The default branch comes from git remote show origin"""
        calls = git_stub(completed(REMOTE_SHOW))
        resolver = GitRepositoryResolver("octocat/articles")
        assert resolver.resolve("/images/cat.png") == Resolution(
            "https://raw.githubusercontent.com/octocat/articles/main/images/cat.png", True
        )
        assert calls == [["git", "remote", "show", "origin"]]

    def test_branch_looked_up_once(self, git_stub):
        """git runs once per resolver"""
        calls = git_stub(completed(REMOTE_SHOW))
        resolver = GitRepositoryResolver("octocat/articles")
        resolver.resolve("/images/a.png")
        resolver.resolve("/images/b.png")
        assert len(calls) == 1

    def test_configured_branch(self, git_stub):
        """A configured branch skips git"""
        calls = git_stub(AssertionError("git must not run"))
        resolver = GitRepositoryResolver("octocat/articles", branch="develop")
        assert resolver.resolve("/images/a.png").url.endswith("/octocat/articles/develop/images/a.png")
        assert calls == []

    def test_custom_host(self, git_stub):
        """The raw content host is configurable"""
        git_stub(completed(REMOTE_SHOW))
        resolver = GitRepositoryResolver("o/r", host="https://raw.example.com/")
        assert resolver.resolve("/images/a.png").url == "https://raw.example.com/o/r/main/images/a.png"

    def test_from_settings(self, git_stub):
        """Settings supply repository, branch and host"""
        git_stub(AssertionError("git must not run"))
        settings = AppSettings(repository="u/r", default_branch="trunk")
        resolver = GitRepositoryResolver.from_settings(settings)
        assert resolver.resolve("/images/a.png") == Resolution(
            "https://raw.githubusercontent.com/u/r/trunk/images/a.png", True
        )


class TestFallback:
    """Test that failures keep the original path"""

    def test_no_repository(self, git_stub):
        """Without a repository nothing is resolved"""
        calls = git_stub(completed(REMOTE_SHOW))
        assert GitRepositoryResolver("").resolve("/images/a.png") == Resolution("/images/a.png", False)
        assert calls == []

    def test_git_fails(self, git_stub):
        """A failing git command leaves the path unresolved"""
        git_stub(completed(returncode=128, stderr="fatal: not a git repository"))
        assert GitRepositoryResolver("o/r").resolve("/images/a.png") == Resolution("/images/a.png", False)

    def test_git_missing(self, git_stub):
        """A missing git executable leaves the path unresolved"""
        git_stub(FileNotFoundError("git"))
        assert GitRepositoryResolver("o/r").resolve("/images/a.png") == Resolution("/images/a.png", False)

    def test_no_head_branch(self, git_stub):
        """Output without a HEAD branch line leaves the path unresolved"""
        git_stub(completed("* remote origin\n  HEAD branch: (unknown)\n"))
        assert GitRepositoryResolver("o/r").resolve("/images/a.png") == Resolution("/images/a.png", False)
