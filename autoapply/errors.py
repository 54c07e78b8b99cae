"""Failure taxonomy for the bot.

Only ``AuthFailure`` and ``ConfigError`` are fatal, and only at startup.
``FetchFailure`` and ``ApplyFailure`` are raised by the site adapters and
absorbed by the policy loop.
"""
from __future__ import annotations


class AutoApplyError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(AutoApplyError):
    """Settings file or environment holds an unusable value."""


class AuthFailure(AutoApplyError):
    """No logged-in session could be established."""


class FetchFailure(AutoApplyError):
    """The listings page could not be loaded or read."""


class ApplyFailure(AutoApplyError):
    """Submitting an application failed for one posting."""

    def __init__(self, posting_id: str, reason: str) -> None:
        super().__init__(f"{posting_id}: {reason}")
        self.posting_id = posting_id
        self.reason = reason
