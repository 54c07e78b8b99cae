"""
Playwright session for the Codementor dashboard.

Owns the browser lifetime (scoped: closed on every exit path) and the login
flow. Selector helpers here are shared by the listing and apply adapters.
"""
from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from autoapply.config import LOGIN_URL, Credentials
from autoapply.errors import AuthFailure
from autoapply.log import LOG_DIR, get_logger

log = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

EMAIL_FIELDS = ['input[name="email"]', 'input[type="email"]', "#email"]
PASSWORD_FIELDS = ['input[name="password"]', 'input[type="password"]', "#password"]
LOGIN_BUTTONS = ['button[type="submit"]', ".login-btn", '[data-testid="login-submit"]']


def on_login_page(url: str) -> bool:
    u = url.lower()
    return "login" in u or "signin" in u


def visible(locator) -> bool:
    """Safe visibility check that never throws."""
    try:
        return locator.count() > 0 and locator.first.is_visible(timeout=2000)
    except PlaywrightError:
        return False


def first_visible(page, selectors: list[str], *, wait_ms: int = 0):
    """First visible locator among ``selectors``, or None.

    With ``wait_ms`` the page is first given that long for any of them to
    become visible; priority among several still follows list order.
    """
    if wait_ms:
        try:
            page.wait_for_selector(", ".join(selectors), state="visible", timeout=wait_ms)
        except PlaywrightTimeoutError:
            return None
    for sel in selectors:
        loc = page.locator(sel)
        if visible(loc):
            return loc.first
    return None


def click_first_visible(page, selectors: list[str], *, wait_ms: int = 0) -> bool:
    """Try clicking the first visible element matching any selector."""
    loc = first_visible(page, selectors, wait_ms=wait_ms)
    if loc is None:
        return False
    try:
        loc.click()
    except PlaywrightError:
        return False
    return True


class BrowserSession:
    """Chromium page plus everything needed to shut it down again."""

    def __init__(self, *, headless: bool = True, slow_mo: int = 0, screenshots: bool = False) -> None:
        self.headless = headless
        self.slow_mo = slow_mo
        self.screenshots = screenshots
        self.page = None
        self._playwright = None
        self._browser = None

    def __enter__(self) -> "BrowserSession":
        log.info("Initializing browser...")
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, slow_mo=self.slow_mo, args=LAUNCH_ARGS,
            )
            context = self._browser.new_context(
                viewport={"width": 1280, "height": 720},
                user_agent=USER_AGENT,
            )
            self.page = context.new_page()
            self.page.set_default_timeout(20_000)
        except BaseException:
            self.close()
            raise
        log.info("Browser initialized successfully")
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
                log.info("Browser closed")
            except PlaywrightError as exc:
                log.warning("Browser close failed: %s", exc)
            self._browser = None
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except PlaywrightError as exc:
                log.warning("Playwright stop failed: %s", exc)
            self._playwright = None
        self.page = None

    def screenshot(self, name: str) -> None:
        if not self.screenshots or self.page is None:
            return
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            self.page.screenshot(path=str(LOG_DIR / f"debug-{name}.png"))
        except (PlaywrightError, OSError) as exc:
            log.debug("Screenshot %s failed: %s", name, exc)


def login(session: BrowserSession, credentials: Credentials) -> BrowserSession:
    """Sign in; raises AuthFailure if the dashboard cannot be reached."""
    page = session.page
    try:
        log.info("Navigating to login page...")
        page.goto(LOGIN_URL, wait_until="networkidle", timeout=60_000)
        session.screenshot("login-page")

        email_input = first_visible(page, EMAIL_FIELDS)
        pass_input = first_visible(page, PASSWORD_FIELDS)
        if email_input is None or pass_input is None:
            raise AuthFailure("Login form not found")
        email_input.fill(credentials.email)
        pass_input.fill(credentials.password)

        if not click_first_visible(page, LOGIN_BUTTONS):
            page.keyboard.press("Enter")

        page.wait_for_url(lambda url: not on_login_page(url), timeout=30_000)
    except PlaywrightError as exc:
        session.screenshot("login-failed")
        err = str(exc)[:150].split("\n")[0]
        raise AuthFailure(f"Login failed: {err}") from exc

    session.screenshot("after-login")
    log.info("Successfully logged in to Codementor (%s)", page.url)
    return session
