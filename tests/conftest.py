import threading
from datetime import datetime, timedelta, timezone

import pytest

from autoapply.clock import Clock
from autoapply.config import Settings
from autoapply.models import ApplyResult, Posting
from autoapply.sources.base import ApplyAction, ListingSource


class FakeClock(Clock):
    """Clock whose sleeps only move time forward."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)

    def sleep(self, seconds: float, stop: threading.Event) -> bool:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)
        return stop.is_set()


class ListSource(ListingSource):
    """Serves one batch per call; the last batch repeats. Exceptions are raised."""

    def __init__(self, *batches) -> None:
        self.batches = list(batches)
        self.calls = 0

    def fetch_postings(self, session):
        self.calls += 1
        if not self.batches:
            return
        batch = self.batches[min(self.calls, len(self.batches)) - 1]
        if isinstance(batch, BaseException):
            raise batch
        yield from batch


class RecordingApplier(ApplyAction):
    def __init__(self, outcomes: dict | None = None) -> None:
        self.outcomes = outcomes or {}
        self.calls: list[tuple[str, str]] = []

    def apply(self, session, posting, cover_letter):
        self.calls.append((posting.id, cover_letter))
        outcome = self.outcomes.get(posting.id, ApplyResult(True, "ok"))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_posting(pid: str, **overrides) -> Posting:
    fields = dict(
        id=pid,
        title=f"Request {pid}",
        description="Need help with a backend bug",
        budget_text="$150",
        skills_text="Python API work",
        url=f"https://www.codementor.io/m/requests/{pid}",
    )
    fields.update(overrides)
    return Posting(**fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        check_interval_ms=30_000,
        max_applications_per_hour=3,
        apply_delay_ms=3_000,
        skills_filter=["python"],
        min_budget=100,
    )


@pytest.fixture
def recorded():
    return []
