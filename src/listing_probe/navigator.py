"""
Navigator - drives the page to the search URL
"""

import logging

from playwright.sync_api import Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from listing_probe.errors import NavigationError, NavigationFailure

logger = logging.getLogger(__name__)

# Parse-complete is enough; ads and trackers can keep "load" pending for a long time.
DEFAULT_WAIT_UNTIL = "domcontentloaded"


def navigate(page: Page, url: str, timeout_ms: int, wait_until: str = DEFAULT_WAIT_UNTIL) -> None:
    """Navigate once; raises NavigationError on timeout or network failure."""
    logger.info("Navigating to %s (wait_until=%s, timeout=%sms)", url, wait_until, timeout_ms)
    try:
        response = page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        logger.warning("Navigation timed out after %sms: %s", timeout_ms, url)
        raise NavigationError(url, NavigationFailure.TIMEOUT, str(exc)) from exc
    except PlaywrightError as exc:
        logger.warning("Navigation failed: %s", exc)
        raise NavigationError(url, NavigationFailure.NETWORK_FAILURE, str(exc)) from exc

    if response is not None and response.status >= 400:
        logger.warning("Search page answered HTTP %s: %s", response.status, url)
