"""
Probe pipeline - acquire, navigate, wait, extract, report, release
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from listing_probe.content_ready import ReadySignal, wait_for_content
from listing_probe.diagnostics import Reporter, capture_diagnostics
from listing_probe.errors import AcquisitionError, ProbeError
from listing_probe.extractor import extract
from listing_probe.models import ExtractionResult, SearchQuery
from listing_probe.navigator import navigate
from listing_probe.session import acquire

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    query: SearchQuery
    url: str
    result: Optional[ExtractionResult] = None
    error: Optional[BaseException] = None
    ready: Optional[ReadySignal] = None
    screenshot: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None


class ProbeRunner:
    """Runs one single-page extraction against the configured search"""

    def __init__(self, config, acquire_session: Callable = acquire, reporter: Optional[Reporter] = None):
        self.config = config
        self.acquire_session = acquire_session
        self.reporter = reporter or Reporter()

    def _should_screenshot(self, failed: bool) -> bool:
        return failed or self.config.get_screenshot_policy() == "always"

    def _scrape(self, session, outcome: RunOutcome) -> None:
        page = session.new_page()

        print(f"🌐 Navigating to {outcome.url}")
        navigate(page, outcome.url, self.config.get_navigation_timeout())

        print("⏳ Waiting for job listings to load...")
        selectors = self.config.get_selectors()
        outcome.ready = wait_for_content(
            page,
            selectors.ready,
            self.config.get_ready_timeout(),
            self.config.get_fallback_delay(),
        )
        logger.info("Content ready signal: %s", outcome.ready.label)

        print("🔎 Extracting job listings...")
        outcome.result = extract(page, selectors, self.config.get_max_results())

    def run(self, query: Optional[SearchQuery] = None) -> RunOutcome:
        query = query or self.config.get_search_query()
        outcome = RunOutcome(query=query, url="")
        logger.info("Probe starting: %s", query)

        try:
            outcome.url = query.build_url(self.config.get_search_url_template())
            session_config = self.config.session_config()
        except Exception as exc:
            logger.exception("Could not prepare the probe run")
            outcome.error = exc
            self.reporter.report(None, exc)
            return outcome

        try:
            session = self.acquire_session(session_config)
        except AcquisitionError as exc:
            outcome.error = exc
            self.reporter.report(None, exc)
            return outcome
        print("✓ Browser launched successfully")

        try:
            self._scrape(session, outcome)
        except ProbeError as exc:
            outcome.error = exc
        except Exception as exc:
            logger.exception("Unexpected error during probe")
            outcome.error = exc
        finally:
            try:
                if self._should_screenshot(outcome.error is not None):
                    html_path = (
                        self.config.get_html_snapshot_path()
                        if self.config.is_html_snapshot_enabled()
                        else None
                    )
                    outcome.screenshot = capture_diagnostics(
                        session, self.config.get_screenshot_path(), html_path
                    )
            finally:
                session.release()
                print("✓ Browser closed")

        self.reporter.report(outcome.result, outcome.error)
        return outcome


def run_probe(config, query: Optional[SearchQuery] = None, acquire_session: Callable = acquire) -> RunOutcome:
    """Convenience wrapper: one run with the default reporter"""
    return ProbeRunner(config, acquire_session=acquire_session).run(query)
