"""Exception types raised by SecretGate."""

from __future__ import annotations


class SecretGateError(Exception):
    """Base class for all SecretGate errors."""


class ConfigError(SecretGateError):
    """The configuration file is malformed or contains an invalid value."""


class MissingDependency(SecretGateError):
    """One or more required external commands could not be located."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = sorted(missing)
        super().__init__(f"required command(s) not found: {', '.join(self.missing)}")


class NotARepository(SecretGateError):
    """The working directory is not inside a git working tree."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = "not a git repository"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class GitCommandError(SecretGateError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"`{' '.join(command)}` exited with status {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class FileDecodeError(SecretGateError):
    """A staged file could not be read as text."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
