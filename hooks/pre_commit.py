#!/usr/bin/env python3
"""Git pre-commit hook for SecretGate.

Install by copying or symlinking this file to `.git/hooks/pre-commit`,
or use with the pre-commit framework:

    # .pre-commit-config.yaml
    repos:
      - repo: local
        hooks:
          - id: secretgate
            name: SecretGate staged secret scan
            entry: python -m secretgate
            language: python
            pass_filenames: false
            always_run: true
"""

from __future__ import annotations

import subprocess
import sys


def main() -> int:
    """Run SecretGate on staged files; a non-zero status aborts the commit."""
    cmd = [sys.executable, "-m", "secretgate"]

    result = subprocess.run(cmd)
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
