#!/usr/bin/env python3
"""Lint the PAYE rule set YAML files from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

# Running from a checkout: expose ``src`` so the validator imports without an
# editable install, the same way ``tests/conftest.py`` does.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from payetax.backend.config.validator import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
