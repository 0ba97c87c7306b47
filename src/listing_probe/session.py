"""
Browser Session - owns the Playwright process, browser and pages for one run
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from listing_probe.errors import AcquisitionError
from listing_probe.models import SessionConfig

logger = logging.getLogger(__name__)


class BrowserSession:
    """Scoped browser session: acquire once, release exactly once"""

    def __init__(self, config: SessionConfig, playwright_factory: Callable = sync_playwright):
        self.config = config
        self._playwright_factory = playwright_factory
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.contexts: List[BrowserContext] = []
        self.released = False

    def _resolve_executable_path(self) -> Optional[str]:
        executable_path = self.config.executable_path
        if executable_path and not Path(executable_path).exists():
            logger.warning("Browser executable not found: %s (using bundled browser)", executable_path)
            return None
        return executable_path

    def acquire(self) -> "BrowserSession":
        """Start Playwright and launch Chromium"""
        logger.info("Starting browser...")
        try:
            self.playwright = self._playwright_factory().start()
            self.browser = self.playwright.chromium.launch(
                headless=self.config.headless,
                executable_path=self._resolve_executable_path(),
                args=list(self.config.launch_args),
                timeout=self.config.launch_timeout_ms,
            )
        except Exception as exc:
            logger.error("Browser launch failed: %s", exc)
            self.release()
            raise AcquisitionError(f"Browser launch failed: {exc}") from exc

        logger.info("Browser started successfully")
        return self

    def new_page(self) -> Page:
        """Open a page with the configured viewport and user agent"""
        if self.browser is None or self.released:
            raise RuntimeError("Browser session is not active")

        context = self.browser.new_context(
            viewport={"width": self.config.viewport.width, "height": self.config.viewport.height},
            user_agent=self.config.user_agent,
        )
        self.contexts.append(context)
        page = context.new_page()

        if self.config.use_stealth:
            try:
                from playwright_stealth.stealth import Stealth
                Stealth().apply_stealth_sync(page)
                logger.info("Playwright stealth enabled")
            except Exception as exc:
                logger.warning("Failed to enable stealth mode: %s", exc)

        return page

    def pages(self) -> List[Page]:
        """All open pages, oldest first"""
        pages: List[Page] = []
        for context in self.contexts:
            pages.extend(context.pages)
        return pages

    def release(self) -> None:
        """Clean up browser resources; safe to call more than once"""
        if self.released:
            return
        self.released = True

        for context in self.contexts:
            try:
                context.close()
            except Exception:
                logger.debug("Browser context close failed", exc_info=True)
        try:
            if self.browser:
                self.browser.close()
        except Exception:
            logger.debug("Browser close failed", exc_info=True)
        try:
            if self.playwright:
                self.playwright.stop()
        except Exception:
            logger.debug("Playwright stop failed", exc_info=True)
        logger.info("Browser closed")

    def __enter__(self) -> "BrowserSession":
        if self.browser is None:
            self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def acquire(config: SessionConfig, playwright_factory: Callable = sync_playwright) -> BrowserSession:
    """Launch a browser for one run; raises AcquisitionError if it cannot start"""
    return BrowserSession(config, playwright_factory).acquire()
