"""Logging setup: console at LOG_LEVEL plus a daily DEBUG file in logs/.

Both handlers mask the account password, so a Playwright error that echoes
a filled form value never writes it to disk.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
SECRET_ENV_KEYS = ("CODEMENTOR_PASSWORD",)
MASK = "***"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


class SecretMaskFilter(logging.Filter):
    def __init__(self, env_keys: tuple[str, ...] = SECRET_ENV_KEYS) -> None:
        super().__init__()
        self.env_keys = env_keys

    def _secrets(self) -> list[str]:
        # Read at emit time: .env is loaded after the first logger exists
        values = (os.environ.get(k, "").strip() for k in self.env_keys)
        return [v for v in values if len(v) >= 4]

    def filter(self, record: logging.LogRecord) -> bool:
        secrets = self._secrets()
        if not secrets:
            return True
        message = record.getMessage()
        masked = message
        for secret in secrets:
            masked = masked.replace(secret, MASK)
        if masked != message:
            record.msg, record.args = masked, None
        return True


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers are installed on first use."""
    global _configured
    if not _configured:
        configure()
        _configured = True
    return logging.getLogger(name)


def configure(log_dir: Path | None = None) -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(min(level, logging.DEBUG))
    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    mask = SecretMaskFilter()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    console.addFilter(mask)
    root.addHandler(console)

    log_dir = log_dir or LOG_DIR
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        fh = logging.FileHandler(log_dir / f"bot_{day}.log", encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"File logging disabled: {exc}\n")
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    fh.addFilter(mask)
    root.addHandler(fh)
