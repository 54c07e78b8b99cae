"""Data models for postings, match criteria and application outcomes."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

APPLIED = "applied"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class Posting:
    id: str
    title: str
    description: str = ""
    budget_text: str = ""
    skills_text: str = ""
    url: str = ""


@dataclass(frozen=True)
class MatchCriteria:
    skills_filter: frozenset[str] = frozenset()
    min_budget: int = 0
    synonyms: dict[str, frozenset[str]] = field(default_factory=dict)
    # Postings with blank skills text still go through keyword matching
    # unless this is set.
    pass_on_missing_skills: bool = False


@dataclass
class ApplicationRecord:
    posting_id: str
    timestamp: str
    outcome: str
    reason: str | None = None
    title: str = ""
    budget_text: str = ""
    url: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RateState:
    applied_count: int
    window_start: datetime


@dataclass
class ApplyResult:
    applied: bool
    reason: str | None = None


@dataclass
class CycleSummary:
    fetched: int = 0
    applied: int = 0
    failed: int = 0
    skipped: int = 0
    quota_blocked: bool = False
    fetch_error: str | None = None
    records: list[ApplicationRecord] = field(default_factory=list)


class LoopState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    FILTERING = "filtering"
    APPLYING = "applying"
    SLEEPING = "sleeping"
