#!/usr/bin/env python3
"""Entry point to run the Codementor auto-apply bot."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from autoapply.config import SETTINGS_PATH
from autoapply.log import get_logger

log = get_logger(__name__)


def main() -> int:
    if not SETTINGS_PATH.exists():
        log.warning("No %s found, running with default settings", SETTINGS_PATH)

    from autoapply.bot import run

    code = run()
    log.info("Bot exited with code %d", code)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
