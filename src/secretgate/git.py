"""Git access for SecretGate.

All repository queries go through a :class:`RepoGateway` so the hook logic
can be exercised without a real git binary. :class:`SubprocessGateway` is
the production implementation; it never changes the process working
directory and passes ``cwd`` explicitly instead.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from secretgate.errors import GitCommandError, NotARepository

GIT_DIR_NAME = ".git"


class RepoGateway(ABC):
    """Narrow interface over the version-control tool."""

    @abstractmethod
    def git_dir(self) -> str:
        """Return the repository metadata directory, absolute or relative.

        Raises:
            NotARepository: If the working directory is not in a repository.
        """
        ...  # pragma: no cover

    @abstractmethod
    def staged_files(self, repo_root: Path) -> list[str]:
        """Return paths staged as added, copied or modified.

        Paths are relative to ``repo_root``, in the order git reports them.

        Raises:
            GitCommandError: If the staged-file query fails.
        """
        ...  # pragma: no cover


class SubprocessGateway(RepoGateway):
    """RepoGateway backed by a git executable."""

    def __init__(self, git_path: str, cwd: str | Path | None = None) -> None:
        self.git_path = git_path
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    def _run(self, args: list[str], cwd: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.git_path, *args],
            capture_output=True,
            text=True,
            check=False,
            cwd=cwd,
        )

    def git_dir(self) -> str:
        try:
            result = self._run(["rev-parse", "--git-dir"], self.cwd)
        except OSError as e:
            raise NotARepository(str(e)) from e
        if result.returncode != 0:
            raise NotARepository(result.stderr.strip())

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = self.cwd / git_dir
        return str(git_dir)

    def staged_files(self, repo_root: Path) -> list[str]:
        args = ["diff", "--cached", "--name-only", "--diff-filter=ACM", "-z"]
        try:
            result = self._run(args, repo_root)
        except OSError as e:
            raise GitCommandError(["git", *args], -1, str(e)) from e
        if result.returncode != 0:
            raise GitCommandError(["git", *args], result.returncode, result.stderr)

        # -z output is NUL separated, so paths with spaces stay intact
        return [p for p in result.stdout.split("\0") if p]


def resolve_repo_root(gateway: RepoGateway, cwd: str | Path | None = None) -> Path:
    """Derive the working-tree root from the gateway's git-dir.

    A git-dir ending in ``.git`` yields its parent. Anything else (linked
    worktrees, bare layouts) is returned unchanged.

    Raises:
        NotARepository: Propagated from the gateway.
    """
    git_dir = Path(gateway.git_dir())
    if not git_dir.is_absolute():
        base = Path(cwd) if cwd is not None else Path.cwd()
        git_dir = base / git_dir
    git_dir = git_dir.resolve()

    if git_dir.name == GIT_DIR_NAME:
        return git_dir.parent
    return git_dir
