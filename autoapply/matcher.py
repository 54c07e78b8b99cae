"""Decide whether a scraped posting qualifies for an application."""
from __future__ import annotations

from collections.abc import Collection, Mapping

from autoapply.log import get_logger
from autoapply.models import MatchCriteria, Posting
from autoapply.parsing import extract_budget_amount, normalize_text

log = get_logger(__name__)

ALREADY_APPLIED = "already applied"
NO_MATCHING_SKILLS = "no matching skills"
BUDGET_TOO_LOW = "budget too low"


def expand_keywords(
    keywords: Collection[str],
    synonyms: Mapping[str, Collection[str]],
) -> list[str]:
    """Keywords plus their synonym variants, lowercased and de-duplicated."""
    expanded: list[str] = []
    for kw in keywords:
        key = normalize_text(kw)
        if not key:
            continue
        expanded.append(key)
        expanded.extend(normalize_text(v) for v in synonyms.get(key, ()))
    return [t for t in dict.fromkeys(expanded) if t]


def _skills_match(posting: Posting, criteria: MatchCriteria) -> bool:
    if not criteria.skills_filter:
        return True
    if criteria.pass_on_missing_skills and not normalize_text(posting.skills_text):
        return True
    text = normalize_text(f"{posting.title} {posting.description} {posting.skills_text}")
    terms = expand_keywords(sorted(criteria.skills_filter), criteria.synonyms)
    return any(t in text for t in terms)


def _budget_ok(posting: Posting, criteria: MatchCriteria) -> bool:
    if criteria.min_budget <= 0:
        return True
    amount = extract_budget_amount(posting.budget_text)
    if amount is None:
        # Unparsable budget never blocks a posting
        return True
    return amount >= criteria.min_budget


def rejection_reason(
    posting: Posting,
    criteria: MatchCriteria,
    applied_ids: Collection[str],
) -> str | None:
    """Why ``posting`` should be skipped, or None when it qualifies."""
    if posting.id in applied_ids:
        return ALREADY_APPLIED
    if not _skills_match(posting, criteria):
        return NO_MATCHING_SKILLS
    if not _budget_ok(posting, criteria):
        return BUDGET_TOO_LOW
    return None


def should_apply(
    posting: Posting,
    criteria: MatchCriteria,
    applied_ids: Collection[str],
) -> bool:
    return rejection_reason(posting, criteria, applied_ids) is None
