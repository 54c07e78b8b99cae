"""
Submit an application through the request page's own form.

Opens the posting, clicks the first visible respond/apply button, pastes the
cover letter into the message box and submits.
"""
from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError

from autoapply.browser import click_first_visible, first_visible
from autoapply.log import get_logger
from autoapply.models import ApplyResult, Posting
from autoapply.sources.base import ApplyAction

log = get_logger(__name__)

APPLY_BUTTONS = [
    'button:has-text("Interested")',
    'button:has-text("Apply")',
    'a:has-text("Apply")',
    'button:has-text("Send proposal")',
    'button:has-text("Respond")',
]
MESSAGE_FIELDS = ['textarea[name="message"]', "textarea", '[contenteditable="true"]']
SUBMIT_BUTTONS = [
    'button[type="submit"]',
    'button:has-text("Send")',
    'button:has-text("Submit")',
    'input[type="submit"]',
]
# How long each form step may take to render
STEP_WAIT_MS = 8_000


class DashboardApplyAction(ApplyAction):
    def apply(self, session, posting: Posting, cover_letter: str) -> ApplyResult:
        if not posting.url:
            return ApplyResult(False, "No URL for this posting")
        page = session.page
        try:
            page.goto(posting.url, wait_until="domcontentloaded", timeout=25_000)

            if not click_first_visible(page, APPLY_BUTTONS, wait_ms=STEP_WAIT_MS):
                return ApplyResult(False, "No apply button found on page")

            field = first_visible(page, MESSAGE_FIELDS, wait_ms=STEP_WAIT_MS)
            if field is None:
                return ApplyResult(False, "No message field found")
            field.fill(cover_letter)

            if not click_first_visible(page, SUBMIT_BUTTONS, wait_ms=STEP_WAIT_MS):
                return ApplyResult(False, "No submit button found")
            page.wait_for_load_state("networkidle", timeout=15_000)
        except PlaywrightError as exc:
            session.screenshot(f"apply-failed-{posting.id}")
            return ApplyResult(False, str(exc)[:150].split("\n")[0])
        return ApplyResult(True, "Submitted via request form")


class DryRunApplyAction(ApplyAction):
    """Logs what would be submitted; never touches the page."""

    def apply(self, session, posting: Posting, cover_letter: str) -> ApplyResult:
        log.info("Would apply to: %s (%s)", posting.title, posting.url)
        log.debug("Cover letter (%d chars):\n%s", len(cover_letter), cover_letter)
        return ApplyResult(True, "dry run")
