"""
Content-Ready Detector - waits for the results list to render
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from playwright.sync_api import Page
from playwright.sync_api import Error as PlaywrightError

from listing_probe.models import SelectorFallbackSpec

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DELAY_MS = 3000


@dataclass(frozen=True)
class ReadySignal:
    matched: Optional[SelectorFallbackSpec] = None
    fell_back: bool = False

    @property
    def label(self) -> str:
        if self.matched is not None:
            return self.matched.name
        return "none (fallback delay)" if self.fell_back else "none"


def _first_present(page: Page, candidates: Sequence[SelectorFallbackSpec]) -> Optional[SelectorFallbackSpec]:
    for candidate in candidates:
        try:
            if page.query_selector(candidate.union()):
                return candidate
        except PlaywrightError:
            logger.debug("Ready probe failed for %s", candidate, exc_info=True)
    return None


def wait_for_content(
    page: Page,
    candidates: Sequence[SelectorFallbackSpec],
    timeout_ms: int,
    fallback_delay_ms: int = DEFAULT_FALLBACK_DELAY_MS,
) -> ReadySignal:
    """Race all candidate selectors; fall back to a fixed delay instead of failing.

    The race runs in the browser as a single wait on the union of every
    candidate selector, so whichever family attaches first settles it and the
    rest are simply never awaited again. The winner is then identified by
    probing the candidates in order.
    """
    race = ", ".join(candidate.union() for candidate in candidates)
    try:
        page.wait_for_selector(race, state="attached", timeout=timeout_ms)
    except PlaywrightError as exc:
        logger.info("No results selector within %sms (%s); waiting %sms instead",
                    timeout_ms, exc.__class__.__name__, fallback_delay_ms)
        print("   Could not find job listing selector, trying alternative approach...")
        page.wait_for_timeout(fallback_delay_ms)
        return ReadySignal(matched=None, fell_back=True)

    matched = _first_present(page, candidates)
    if matched is not None:
        logger.info("Results ready via %s", matched)
    return ReadySignal(matched=matched)
