"""
Diagnostics & Reporter - best-effort screenshots and the console summary
"""

import logging
import traceback
from pathlib import Path
from typing import Optional

from listing_probe.errors import DiagnosticFailure, ProbeError
from listing_probe.models import ExtractionResult

logger = logging.getLogger(__name__)

ZERO_RESULT_CAUSES = (
    "The site blocked the scraping attempt (auth wall, captcha or rate limit)",
    "The page structure changed and the selectors no longer match",
    "There might be issues with the browser environment (sandbox, fonts, memory)",
)


def _first_page(session):
    try:
        pages = session.pages()
    except Exception as exc:
        raise DiagnosticFailure(f"Could not list open pages: {exc}") from exc
    if not pages:
        raise DiagnosticFailure("No open page to capture")
    return pages[0]


def capture_diagnostics(session, screenshot_path: Path, html_path: Optional[Path] = None) -> Optional[Path]:
    """Screenshot the first open page; never raises.

    Returns the screenshot path when one was written. When ``html_path`` is
    given the page HTML is saved next to it, also best-effort.
    """
    try:
        page = _first_page(session)
        try:
            page.screenshot(path=str(screenshot_path))
        except Exception as exc:
            raise DiagnosticFailure(f"Screenshot failed: {exc}") from exc
    except DiagnosticFailure as exc:
        logger.warning("Diagnostics skipped: %s", exc)
        print(f"   Could not take screenshot: {exc}")
        return None

    logger.info("Screenshot saved: %s", screenshot_path)
    print(f"📸 Screenshot saved as {screenshot_path}")

    if html_path is not None:
        try:
            html_path.write_text(page.content(), encoding="utf-8")
            logger.info("Page HTML saved: %s", html_path)
        except Exception:
            logger.warning("Page HTML snapshot failed", exc_info=True)

    return screenshot_path


class Reporter:
    """Prints run results and failures in plain language"""

    def report(self, result: Optional[ExtractionResult], error: Optional[BaseException] = None) -> None:
        if error is not None:
            self._report_failure(error)
            return
        if result is None:
            return

        print("\nTest results:")
        print("-------------")
        print(f"Found {len(result)} job listings")

        if not result.records:
            self._report_zero_results(result)
            return

        print("\nJob listings found:")
        for i, record in enumerate(result.records, 1):
            print(f"\nJob {i}:")
            print(f"- Title: {record.title}")
            print(f"- Company: {record.organization}")
            print(f"- Location: {record.location}")
            print(f"- URL: {record.link}")
        print("\n✅ Probe SUCCESSFUL: listings were extracted from the rendered page.")
        logger.info("Reported %s listings", len(result))

    def _report_zero_results(self, result: ExtractionResult) -> None:
        logger.warning("No listings extracted (%s candidate cards considered)", result.candidates)
        print("\n⚠️  No job listings found. This could indicate:")
        for i, cause in enumerate(ZERO_RESULT_CAUSES, 1):
            print(f"{i}. {cause}")

    def _report_failure(self, error: BaseException) -> None:
        if isinstance(error, ProbeError):
            logger.error("Probe failed: %s", error.message)
            print(f"\n❌ Error during probe: {error.message}")
            print(f"   Suspected cause: {error.cause}")
        else:
            logger.error("Unexpected error during probe", exc_info=error)
            print("\n❌ Unexpected error during probe:")
            print("".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip())
        print("\n❌ Probe FAILED! There might be issues running the browser in this environment.")
