"""
Codementor auto-apply bot.

Runs: login → (fetch → filter → apply → record → sleep) until SIGINT/SIGTERM.
The browser session is closed on every way out.
"""
from __future__ import annotations

import signal
import threading

from playwright.sync_api import Error as PlaywrightError

from autoapply.browser import BrowserSession, login
from autoapply.config import (
    Credentials,
    Settings,
    ensure_dirs,
    env_flag,
    env_int,
    load_credentials,
    load_settings,
)
from autoapply.errors import AuthFailure, ConfigError
from autoapply.log import get_logger
from autoapply.policy import PolicyLoop
from autoapply.sources import get_apply_action, get_listing_source

log = get_logger(__name__)


def install_signal_handlers(stop: threading.Event) -> None:
    def _handle(signum, _frame) -> None:
        log.info("Received %s, shutting down after the current step", signal.Signals(signum).name)
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle)


def run(
    settings: Settings | None = None,
    *,
    credentials: Credentials | None = None,
    stop: threading.Event | None = None,
) -> int:
    """Run the bot until stopped. Returns a process exit code."""
    ensure_dirs()
    try:
        settings = settings or load_settings()
        headless = env_flag("RUN_HEADLESS", True)
        slow_mo = env_int("SLOW_MO_MS", 0)
    except ConfigError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2

    credentials = credentials or load_credentials()
    if credentials is None:
        log.error("CODEMENTOR_EMAIL / CODEMENTOR_PASSWORD not set in .env")
        return 1

    if stop is None:
        stop = threading.Event()
        install_signal_handlers(stop)

    try:
        with BrowserSession(
            headless=headless,
            slow_mo=slow_mo,
            screenshots=env_flag("DEBUG_SCREENSHOTS"),
        ) as session:
            login(session, credentials)
            loop = PolicyLoop(
                session,
                get_listing_source(settings, stop),
                get_apply_action(env_flag("DRY_RUN")),
                settings,
                stop=stop,
            )
            loop.run()
    except AuthFailure as exc:
        log.error("%s", exc)
        return 1
    except PlaywrightError as exc:
        log.error("Browser failed to start: %s", exc)
        return 1
    return 0
