"""
Application policy loop.

Each cycle: refresh the hourly quota window, pull postings, filter them,
apply to the qualifying ones one at a time, record the outcome. ``run``
repeats cycles on a fixed interval until the shutdown event is set.
"""
from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable

from autoapply.clock import Clock
from autoapply.config import Settings
from autoapply.cover_letter import generate_cover_letter
from autoapply.errors import ApplyFailure
from autoapply.log import get_logger
from autoapply.matcher import rejection_reason
from autoapply.models import (
    APPLIED,
    FAILED,
    SKIPPED,
    ApplicationRecord,
    ApplyResult,
    CycleSummary,
    LoopState,
    Posting,
    RateState,
)
from autoapply.sources.base import ApplyAction, ListingSource
from autoapply.tracker import record_application

log = get_logger(__name__)

QUOTA_WINDOW = timedelta(hours=1)
QUOTA_REACHED = "quota reached"


def refresh_window(rate: RateState, now: datetime) -> bool:
    """Start a new quota window once the current one is over an hour old."""
    if now - rate.window_start > QUOTA_WINDOW:
        rate.applied_count = 0
        rate.window_start = now
        return True
    return False


class PolicyLoop:
    def __init__(
        self,
        session,
        source: ListingSource,
        applier: ApplyAction,
        settings: Settings,
        *,
        clock: Clock | None = None,
        stop: threading.Event | None = None,
        rate: RateState | None = None,
        applied_ids: set[str] | None = None,
        recorder: Callable[[ApplicationRecord], object] = record_application,
        letter_writer: Callable[[Posting, int], str] = generate_cover_letter,
    ) -> None:
        self.session = session
        self.source = source
        self.applier = applier
        self.settings = settings
        self.criteria = settings.criteria()
        self.clock = clock or Clock()
        self.stop = stop or threading.Event()
        self.rate = rate or RateState(applied_count=0, window_start=self.clock.now())
        self.applied_ids = applied_ids if applied_ids is not None else set()
        self.recorder = recorder
        self.letter_writer = letter_writer
        self.state = LoopState.IDLE

    @property
    def max_per_hour(self) -> int:
        return self.settings.max_applications_per_hour

    def quota_full(self) -> bool:
        return self.rate.applied_count >= self.max_per_hour

    def _record(self, summary: CycleSummary, posting: Posting, outcome: str, reason: str | None) -> None:
        record = ApplicationRecord(
            posting_id=posting.id,
            timestamp=self.clock.now().isoformat(),
            outcome=outcome,
            reason=reason,
            title=posting.title,
            budget_text=posting.budget_text,
            url=posting.url,
        )
        summary.records.append(record)
        if outcome == SKIPPED:
            summary.skipped += 1
            return
        self.recorder(record)

    def _apply_one(self, summary: CycleSummary, posting: Posting) -> bool:
        try:
            letter = self.letter_writer(posting, self.settings.cover_letter_max_length)
            result = self.applier.apply(self.session, posting, letter)
        except ApplyFailure as exc:
            result = ApplyResult(False, exc.reason)
        except Exception as exc:
            result = ApplyResult(False, f"{type(exc).__name__}: {str(exc)[:150]}")

        if result.applied:
            self.applied_ids.add(posting.id)
            self.rate.applied_count += 1
            summary.applied += 1
            self._record(summary, posting, APPLIED, result.reason)
            log.info("✓ Applied to %r [%s]", posting.title, posting.id)
            return True

        reason = result.reason or "apply failed"
        summary.failed += 1
        self._record(summary, posting, FAILED, reason)
        log.warning("✗ Apply failed for %r [%s]: %s", posting.title, posting.id, reason)
        return False

    def run_cycle(self) -> CycleSummary:
        summary = CycleSummary()
        self.state = LoopState.IDLE

        if refresh_window(self.rate, self.clock.now()):
            log.info("Application count reset for new hour")

        if self.quota_full():
            log.info("Reached hourly application limit (%d). Waiting...", self.max_per_hour)
            summary.quota_blocked = True
            self.state = LoopState.SLEEPING
            return summary

        self.state = LoopState.FETCHING
        try:
            # Applying navigates away from the listing, so read it all first
            postings = list(self.source.fetch_postings(self.session))
        except Exception as exc:
            log.error("Error fetching job requests: %s", exc)
            summary.fetch_error = str(exc)[:200]
            self.state = LoopState.SLEEPING
            return summary

        summary.fetched = len(postings)
        if not postings:
            log.info("No jobs found, will retry in next cycle")
        else:
            log.info("Processing %d jobs...", len(postings))

        self.state = LoopState.FILTERING
        for index, posting in enumerate(postings):
            if self.stop.is_set():
                log.info("Shutdown requested, leaving cycle early")
                break
            if self.quota_full():
                for rest in postings[index:]:
                    self._record(summary, rest, SKIPPED, QUOTA_REACHED)
                log.info("Hourly quota reached, skipped %d remaining postings", len(postings) - index)
                break

            reason = rejection_reason(posting, self.criteria, self.applied_ids)
            if reason:
                log.debug("Skipping %r - %s", posting.title, reason)
                self._record(summary, posting, SKIPPED, reason)
                continue

            self.state = LoopState.APPLYING
            applied = self._apply_one(summary, posting)
            self.state = LoopState.FILTERING

            more_to_do = index + 1 < len(postings) and not self.quota_full()
            if applied and more_to_do:
                if self.clock.sleep(self.settings.apply_delay_ms / 1000, self.stop):
                    log.info("Shutdown requested, leaving cycle early")
                    break

        log.info("Applications sent this hour: %d/%d", self.rate.applied_count, self.max_per_hour)
        self.state = LoopState.SLEEPING
        return summary

    def run(self) -> None:
        """Cycle until the stop event is set."""
        s = self.settings
        log.info("Starting job monitoring...")
        log.info("Check interval: %ss", s.check_interval_ms / 1000)
        log.info("Max applications per hour: %d", s.max_applications_per_hour)
        log.info("Skills filter: %s", ", ".join(s.skills_filter) or "(any)")
        log.info("Min budget: %d", s.min_budget)

        while not self.stop.is_set():
            try:
                summary = self.run_cycle()
                log.debug(
                    "Cycle: fetched=%d applied=%d failed=%d skipped=%d",
                    summary.fetched, summary.applied, summary.failed, summary.skipped,
                )
            except Exception:
                log.exception("Error in monitoring loop")
            self.state = LoopState.SLEEPING
            if self.clock.sleep(s.check_interval_ms / 1000, self.stop):
                break
        self.state = LoopState.IDLE
        log.info("Monitoring stopped")
