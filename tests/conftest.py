"""Shared test fixtures for SecretGate tests."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from secretgate.config import SecretGateConfig
from secretgate.errors import GitCommandError, NotARepository
from secretgate.git import RepoGateway


class InMemoryGateway(RepoGateway):
    """RepoGateway that answers from fixed values instead of running git."""

    def __init__(
        self,
        git_dir: str | Path | None = None,
        staged: list[str] | None = None,
        staged_error: bool = False,
    ) -> None:
        self._git_dir = git_dir
        self._staged = list(staged or [])
        self._staged_error = staged_error
        self.calls: list[str] = []

    def git_dir(self) -> str:
        self.calls.append("git_dir")
        if self._git_dir is None:
            raise NotARepository("fatal: not a git repository")
        return str(self._git_dir)

    def staged_files(self, repo_root: Path) -> list[str]:
        self.calls.append("staged_files")
        if self._staged_error:
            raise GitCommandError(["git", "diff", "--cached"], 128, "fatal: bad index")
        return list(self._staged)


@pytest.fixture
def repo(tmp_path):
    """An empty working tree with a ``.git`` directory."""
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def bin_dir(tmp_path):
    """A search directory holding an executable named ``git``."""
    directory = tmp_path / "bin"
    directory.mkdir()
    git = directory / "git"
    git.write_text("#!/bin/sh\nexit 0\n")
    git.chmod(git.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return directory


@pytest.fixture
def config():
    return SecretGateConfig()


@pytest.fixture
def write_file(repo):
    """Write a file relative to the repo root and return its relative path."""

    def _write(rel_path: str, content: str | bytes) -> str:
        path = repo / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return rel_path

    return _write


@pytest.fixture
def make_gateway(repo):
    """Build an in-memory gateway rooted at the ``repo`` fixture by default."""

    def _make(staged=None, git_dir=repo / ".git", staged_error=False) -> InMemoryGateway:
        return InMemoryGateway(git_dir=git_dir, staged=staged, staged_error=staged_error)

    return _make
