"""Budget and text helpers used by the matcher and the listing source."""
from __future__ import annotations

import hashlib
import re

_BUDGET_RE = re.compile(r"\$(\d+)")


def normalize_text(s: str | None) -> str:
    return (s or "").strip().lower()


def extract_budget_amount(budget_text: str | None) -> int | None:
    """First ``$<digits>`` amount in the text.

    Returns ``None`` when no amount is present, so an explicit ``$0`` can be
    told apart from a budget the page never stated.
    """
    m = _BUDGET_RE.search(budget_text or "")
    return int(m.group(1)) if m else None


def surrogate_id(*parts: str, prefix: str = "job") -> str:
    """Id for a card the page gave no ``data-id`` or element id.

    Derived from the card content only, so the same card maps to the same id
    on every fetch.
    """
    digest = hashlib.sha256("\x1f".join(p or "" for p in parts).encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"
