"""SecretGate CLI entry point.

Usage:
    secretgate [--config PATH] [--format text|json]
    python -m secretgate [options]

Meant to run as a git pre-commit hook with no arguments. Exit status:
0 when nothing blocks the commit, 1 when secrets were found, 2 when the
environment is unusable (git missing, not a repository, git failure,
bad configuration).
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from secretgate.commands import locate_commands
from secretgate.config import SecretGateConfig
from secretgate.errors import SecretGateError
from secretgate.files import filter_readable
from secretgate.git import RepoGateway, SubprocessGateway, resolve_repo_root
from secretgate.reporters import REPORTERS, exit_code
from secretgate.rules import build_rules
from secretgate.scanner import SecretScanner

EXIT_FATAL = 2


def run(
    config: SecretGateConfig,
    gateway: RepoGateway | None = None,
    search_path: Sequence[str] | None = None,
    cwd: str | Path | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run one pre-commit scan and return the process exit status.

    Args:
        config: Loaded configuration.
        gateway: Repository access. When omitted, a subprocess-backed gateway
            is built from the located ``git`` executable.
        search_path: Directories searched for required commands. Overrides
            ``config.search_path``; both default to ``PATH``.
        cwd: Directory to resolve the repository from. Defaults to the
            current directory.

    Raises:
        SecretGateError: On any fatal prerequisite or git failure.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    # Build rules first so a bad config fails before touching git
    rules = build_rules(config)

    # git is always required, whatever else the config lists
    commands = locate_commands(
        {"git", *config.required_commands},
        search_path if search_path is not None else config.search_path,
    )
    if gateway is None:
        gateway = SubprocessGateway(commands["git"], cwd=cwd)

    repo_root = resolve_repo_root(gateway, cwd)
    staged = gateway.staged_files(repo_root)

    candidates = [p for p in staged if not config.is_path_excluded(p)]
    readable = filter_readable(candidates, repo_root)
    if not readable:
        print("ℹ️  No readable staged files to scan.", file=err)
        return 0

    print(f"🔍 Scanning {len(readable)} staged file(s)...", file=err)
    scanner = SecretScanner(
        rules,
        entropy=config.entropy,
        stderr=err,
    )
    result = scanner.scan(readable, repo_root)

    reporter = REPORTERS[config.report_format]()
    report = reporter.render(result)
    if report:
        print(report, file=out)

    if result.has_findings:
        print(
            f"\n🚫 Commit blocked: {len(result.findings)} potential secret(s) in "
            f"{len(result.findings_by_file())} file(s)",
            file=err,
        )
    else:
        print("✅ No secrets found in staged files.", file=err)

    return exit_code(result)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="secretgate",
        description="SecretGate: block commits that stage secrets",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to .secretgate.yml config file",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=sorted(REPORTERS),
        default=None,
        help="Report format (default: text, or report.format from config)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = SecretGateConfig.load(args.config)
        if args.format:
            config.report_format = args.format
        code = run(config)
    except SecretGateError as e:
        print(f"❌ {e}", file=sys.stderr)
        code = EXIT_FATAL

    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
