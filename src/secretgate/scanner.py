"""Scan staged files for secrets."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import BinaryIO, TextIO

from secretgate.config import EntropyConfig
from secretgate.errors import FileDecodeError
from secretgate.models import Finding, ScanError, ScanResult
from secretgate.rules import CONTENT, ENTROPY_RULE_ID, PATH, Rule, high_entropy_tokens

ALLOW_MARKERS = ("secretgate: allow", "pragma: allowlist secret")

_BINARY_SNIFF_BYTES = 8192
_VISIBLE_PREFIX = 4
_MAX_EVIDENCE = 80


def redact(secret: str) -> str:
    """Mask all but the first few characters of a matched secret."""
    if len(secret) <= _VISIBLE_PREFIX:
        return "*" * len(secret)
    masked = secret[:_VISIBLE_PREFIX] + "*" * (len(secret) - _VISIBLE_PREFIX)
    if len(masked) > _MAX_EVIDENCE:
        masked = masked[:_MAX_EVIDENCE] + "..."
    return masked


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, the way git and editors number lines."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [_strip_newline(line) for line in lines]


def iter_lines(f: BinaryIO, name: str) -> Iterator[tuple[int, str]]:
    """Yield numbered UTF-8 lines from an open binary file.

    Lines are decoded one at a time, so file size is never a limit.

    Raises:
        FileDecodeError: If the file looks binary or is not valid UTF-8.
    """
    if b"\x00" in f.read(_BINARY_SNIFF_BYTES):
        raise FileDecodeError(name, "binary content")
    f.seek(0)

    offset = 0
    # Binary iteration splits on b"\n" only
    for line_no, raw in enumerate(f, start=1):
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileDecodeError(
                name, f"not valid UTF-8 ({e.reason} at byte {offset + e.start})"
            ) from e
        offset += len(raw)
        yield line_no, _strip_newline(line)


class SecretScanner:
    """Match a rule table against staged files and collect findings.

    One file failing to read never stops the scan; the failure is recorded
    as a :class:`ScanError` and the next file is scanned. Every file is
    scanned even after a match so the report lists all offenders at once.
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        entropy: EntropyConfig | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.content_rules = [r for r in rules if r.target == CONTENT]
        self.path_rules = [r for r in rules if r.target == PATH]
        self.entropy = entropy if entropy is not None and entropy.enabled else None
        self.stderr = stderr if stderr is not None else sys.stderr

    def scan(self, paths: Iterable[str], repo_root: str | Path) -> ScanResult:
        """Scan each readable staged path (relative to ``repo_root``).

        Findings on lines read before a decode failure are kept; the rest of
        that file is skipped and recorded as a :class:`ScanError`.
        """
        root = Path(repo_root)
        result = ScanResult()

        for rel_path in paths:
            result.findings.extend(self._check_path(rel_path))
            try:
                with open(root / rel_path, "rb") as f:
                    self._scan_lines(rel_path, iter_lines(f, rel_path), result.findings)
            except FileDecodeError as e:
                self._skip(result, rel_path, e.reason)
                continue
            except OSError as e:
                self._skip(result, rel_path, e.strerror or str(e))
                continue

            result.scanned.append(rel_path)

        return result

    def scan_text(self, file_path: str, text: str) -> list[Finding]:
        """Check every line of ``text`` against the content rules."""
        findings: list[Finding] = []
        self._scan_lines(file_path, enumerate(split_lines(text), start=1), findings)
        return findings

    def _scan_lines(
        self, file_path: str, lines: Iterable[tuple[int, str]], findings: list[Finding]
    ) -> None:
        # Appends as it goes so matches before a decode failure are not lost
        for line_no, line in lines:
            if any(marker in line for marker in ALLOW_MARKERS):
                continue
            findings.extend(self._check_line(file_path, line_no, line))

    def _check_path(self, file_path: str) -> list[Finding]:
        """Flag sensitive file names; at most one finding per path."""
        for rule in self.path_rules:
            if rule.pattern.search(file_path):
                return [
                    Finding(
                        file=file_path,
                        rule_id=rule.rule_id,
                        description=rule.description,
                        evidence=file_path,
                    )
                ]
        return []

    def _check_line(self, file_path: str, line_no: int, line: str) -> list[Finding]:
        findings: list[Finding] = []
        matched_spans: list[tuple[int, int]] = []

        for rule in self.content_rules:
            for match in rule.pattern.finditer(line):
                matched_spans.append(match.span())
                findings.append(
                    Finding(
                        file=file_path,
                        rule_id=rule.rule_id,
                        description=rule.description,
                        line=line_no,
                        column=match.start() + 1,
                        evidence=redact(match.group(0)),
                    )
                )

        if self.entropy is not None:
            for start, token, entropy in high_entropy_tokens(
                line, self.entropy.threshold, self.entropy.min_length
            ):
                # Already reported by a named rule
                if any(s <= start < e for s, e in matched_spans):
                    continue
                findings.append(
                    Finding(
                        file=file_path,
                        rule_id=ENTROPY_RULE_ID,
                        description=f"High-entropy string (entropy={entropy:.2f})",
                        line=line_no,
                        column=start + 1,
                        evidence=redact(token),
                    )
                )

        return findings

    def _skip(self, result: ScanResult, file_path: str, reason: str) -> None:
        result.errors.append(ScanError(file=file_path, reason=reason))
        print(f"⏭️  Skipped {file_path}: {reason}", file=self.stderr)
