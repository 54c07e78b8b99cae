"""Codementor open-requests dashboard as a listing source.

Cards are located with an ordered list of selectors (first one present on
the page wins). When none match, a text heuristic picks out blocks that
read like requests.
"""
from __future__ import annotations

import re
import threading
from collections.abc import Iterator
from urllib.parse import urljoin

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from autoapply.browser import on_login_page
from autoapply.errors import FetchFailure
from autoapply.log import get_logger
from autoapply.models import Posting
from autoapply.parsing import surrogate_id
from autoapply.retry import retry
from autoapply.sources.base import ListingSource

log = get_logger(__name__)

TITLE_SELECTORS = ["h1", "h2", "h3", "h4", "h5", ".title", '[class*="title"]', '[data-testid*="title"]']
DESCRIPTION_SELECTORS = [".description", ".content", "p", '[class*="description"]', '[class*="content"]']
BUDGET_SELECTORS = [".budget", ".price", '[class*="budget"]', '[class*="price"]', '[data-testid*="budget"]']
LINK_SELECTORS = ["a[href]", "[href]"]

HEURISTIC_KEYWORDS = ("help", "need", "looking for", "project")
HEURISTIC_LIMIT = 5
_DOLLAR_RE = re.compile(r"\$\d+")


def _first_text(card, selectors: list[str], *, exclude: str = "") -> str:
    for sel in selectors:
        try:
            loc = card.locator(sel)
            if loc.count() == 0:
                continue
            text = (loc.first.text_content(timeout=1000) or "").strip()
        except PlaywrightError:
            continue
        if text and text != exclude:
            return text
    return ""


def _first_href(card, base_url: str) -> str:
    for sel in LINK_SELECTORS:
        try:
            loc = card.locator(sel)
            if loc.count() == 0:
                continue
            href = loc.first.get_attribute("href")
        except PlaywrightError:
            continue
        if href:
            return urljoin(base_url, href)
    return ""


def card_to_posting(card, index: int, page_url: str) -> Posting:
    title = _first_text(card, TITLE_SELECTORS)
    description = _first_text(card, DESCRIPTION_SELECTORS, exclude=title)
    budget = _first_text(card, BUDGET_SELECTORS)
    url = _first_href(card, page_url)
    body = (card.text_content() or "").strip()

    if not title:
        title = body[:100] or f"Job Request {index + 1}"

    posting_id = (
        card.get_attribute("data-id")
        or card.get_attribute("id")
        or (surrogate_id(url) if url else surrogate_id(title, body))
    )
    return Posting(
        id=posting_id,
        title=title,
        description=description,
        budget_text=budget,
        skills_text=body,
        # No link of its own: apply must not fall back to the listing page
        url=url,
    )


def heuristic_postings(texts: list[str], limit: int = HEURISTIC_LIMIT) -> list[Posting]:
    """Pick request-like text blocks when no card selector matched."""
    found: list[Posting] = []
    for text in texts:
        text = text or ""
        low = text.lower()
        looks_like_request = any(k in low for k in HEURISTIC_KEYWORDS) or "$" in text
        if not looks_like_request or not 50 < len(text) < 1000:
            continue
        budget = _DOLLAR_RE.search(text)
        found.append(
            Posting(
                id=surrogate_id(text, prefix="alt-job"),
                title=text[:100] + "...",
                description=text[:300],
                budget_text=budget.group(0) if budget else "Not specified",
                skills_text=text,
                url="",
            )
        )
        if len(found) >= limit:
            break
    return found


class DashboardListingSource(ListingSource):
    def __init__(
        self,
        requests_url: str,
        card_selectors: list[str],
        *,
        selector_timeout_ms: int = 3000,
        max_cards: int = 50,
        stop: threading.Event | None = None,
    ) -> None:
        self.requests_url = requests_url
        self.card_selectors = list(card_selectors)
        self.selector_timeout_ms = selector_timeout_ms
        self.max_cards = max_cards
        self.stop = stop

    @retry(max_attempts=2, base_delay=2.0, retryable=(PlaywrightTimeoutError,))
    def _open(self, page) -> None:
        page.goto(self.requests_url, wait_until="networkidle", timeout=60_000)

    def find_card_selector(self, page) -> str | None:
        for sel in self.card_selectors:
            try:
                page.wait_for_selector(sel, state="attached", timeout=self.selector_timeout_ms)
            except PlaywrightTimeoutError:
                log.debug("Selector %s not found", sel)
                continue
            log.debug("Found elements with selector %s", sel)
            return sel
        return None

    def fetch_postings(self, session) -> Iterator[Posting]:
        page = session.page
        log.info("Navigating to job requests page...")
        try:
            self._open(page, stop=self.stop)
        except PlaywrightError as exc:
            session.screenshot("navigation-failed")
            raise FetchFailure(f"Could not load {self.requests_url}: {exc}") from exc

        if on_login_page(page.url):
            raise FetchFailure("Redirected to login page - authentication may have failed")
        session.screenshot("job-requests-page")

        selector = self.find_card_selector(page)
        if selector is None:
            log.info("No card selector matched, scanning page text for requests")
            try:
                texts = page.eval_on_selector_all(
                    "div, article, section", "els => els.map(e => e.innerText || '')"
                )
            except PlaywrightError as exc:
                raise FetchFailure(f"Page text scan failed: {exc}") from exc
            postings = heuristic_postings(texts)
            log.info("Found %d potential jobs using text scan", len(postings))
            yield from postings
            return

        cards = page.locator(selector)
        count = cards.count()
        log.info("Found %d job requests (%s)", count, selector)
        for index in range(min(count, self.max_cards)):
            try:
                yield card_to_posting(cards.nth(index), index, page.url)
            except PlaywrightError as exc:
                log.warning("Skipping card %d: %s", index, exc)
