"""Headless browser scrape of a public X/Twitter profile's follower count.

Loads the mobile profile page with Playwright, detects suspended
accounts, and reads the follower link text (``12.5K``, ``1,234``...).
"""

import re

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from coincompare.constants.twitter import (
    CONTENT_SETTLE_MS,
    FOLLOWERS_SELECTOR_TIMEOUT_MS,
    FOLLOWERS_SELECTORS,
    MOBILE_PROFILE_URL,
    MOBILE_USER_AGENT,
    MOBILE_VIEWPORT,
    SUSPENDED_SELECTOR,
    SUSPENDED_TEXT,
)
from coincompare.core.exceptions import ScrapeError
from coincompare.services.followers.models import FollowerLookup, FollowerSource

log = structlog.get_logger(__name__)

_COUNT_PATTERN = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s*([KkMmBb])?")
_MULTIPLIERS = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}


def parse_followers_count(text: str) -> int | None:
    """Parse a displayed follower figure.

    Examples:
        "1,234 Followers" -> 1234
        "12.5K" -> 12500
        "3.1M Followers" -> 3100000

    Returns:
        The count, or None if the text holds no number.
    """
    match = _COUNT_PATTERN.search(text)
    if match is None:
        return None

    number = float(match.group(1).replace(",", ""))
    suffix = (match.group(2) or "").lower()
    return round(number * _MULTIPLIERS.get(suffix, 1))


class BrowserFollowerScraper:
    """Follower source backed by a headless Chromium session.

    A browser is launched per lookup and always closed afterwards.
    """

    name = FollowerSource.BROWSER

    def __init__(self, headless: bool = True, timeout_ms: int = 30_000) -> None:
        self.headless = headless
        self.timeout_ms = timeout_ms

    async def lookup(self, handle: str) -> FollowerLookup:
        """Scrape the follower count for ``handle``.

        Raises:
            ScrapeError: If the browser fails to launch or navigate.
        """
        url = MOBILE_PROFILE_URL.format(handle=handle)
        log.info("follower_scrape_started", handle=handle, url=url)

        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.headless,
                    args=["--no-sandbox", "--disable-setuid-sandbox"],
                )
                try:
                    context = await browser.new_context(
                        viewport=MOBILE_VIEWPORT,
                        user_agent=MOBILE_USER_AGENT,
                        device_scale_factor=2,
                        is_mobile=True,
                        has_touch=True,
                    )
                    page = await context.new_page()
                    page.set_default_timeout(self.timeout_ms)
                    await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)

                    empty_state = await page.query_selector(SUSPENDED_SELECTOR)
                    if empty_state is not None:
                        text = await empty_state.text_content()
                        if text and SUSPENDED_TEXT in text:
                            log.info("follower_scrape_suspended", handle=handle)
                            return FollowerLookup(count=0, suspended=True, source=self.name)

                    await page.wait_for_timeout(CONTENT_SETTLE_MS)
                    count = await self._read_count(page, handle)
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise ScrapeError(f"Browser scrape failed: {e}", handle=handle) from e

        log.info("follower_scrape_finished", handle=handle, followers=count)
        return FollowerLookup(count=count, source=self.name)

    async def _read_count(self, page: Page, handle: str) -> int | None:
        for selector in FOLLOWERS_SELECTORS:
            try:
                element = await page.wait_for_selector(
                    selector, timeout=FOLLOWERS_SELECTOR_TIMEOUT_MS
                )
            except PlaywrightTimeoutError:
                log.debug("follower_selector_missing", handle=handle, selector=selector)
                continue

            text = await element.text_content() if element is not None else None
            count = parse_followers_count(text or "")
            if count is not None:
                return count
        return None

    async def close(self) -> None:
        """Nothing is held between lookups."""
