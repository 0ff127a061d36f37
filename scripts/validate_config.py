#!/usr/bin/env python3
"""Validate the listentotaxman configuration file without an editable install."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the src directory is available on the import path when running directly
# from a Git checkout, mirroring ``tests/conftest.py``.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from listentotaxman.config.validator import report  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    arguments = sys.argv[1:] if argv is None else argv
    path = Path(arguments[0]).expanduser() if arguments else None
    return report(path)


if __name__ == "__main__":
    raise SystemExit(main())
