# tests/conftest.py
import os
import pathlib
import types
from typing import Optional

import pytest
import yaml
from bs4 import BeautifulSoup
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from listing_probe.config_loader import load_config
from listing_probe.extractor import query_snapshot

FIXTURES = pathlib.Path(__file__).parent / "fixtures"
SEARCH_URL = "https://www.linkedin.com/jobs/search/?keywords=devops&location=India"


# ---------------------------------------------------------------------
# Live tests are opt-in: use --live or RUN_LIVE_TESTS=1
# ---------------------------------------------------------------------
def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked as 'live' (real browser, network).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "live: launches a real browser against the live site (skipped by default).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_live = config.getoption("--live") or os.getenv("RUN_LIVE_TESTS") == "1"
    if run_live:
        return
    skip_live = pytest.mark.skip(reason="live tests disabled (use --live or RUN_LIVE_TESTS=1)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(autouse=True)
def _env_defaults(monkeypatch):
    monkeypatch.delenv("BROWSER_EXECUTABLE_PATH", raising=False)
    yield


# ---------------------------------------------------------------------
# HTML helpers
# ---------------------------------------------------------------------
def card(
    title: Optional[str] = "DevOps Engineer",
    organization: Optional[str] = "Acme",
    location: Optional[str] = "Bengaluru, India",
    href: Optional[str] = "https://in.linkedin.com/jobs/view/1",
) -> str:
    """One guest-layout result card; pass None to leave a field out."""
    parts = ["<li><div class='base-card'>"]
    if href is not None:
        parts.append(f"<a class='base-card__full-link' href='{href}'>link</a>")
    if title is not None:
        parts.append(f"<h3 class='base-search-card__title'>{title}</h3>")
    if organization is not None:
        parts.append(f"<h4 class='base-search-card__subtitle'>{organization}</h4>")
    if location is not None:
        parts.append(f"<span class='job-search-card__location'>{location}</span>")
    parts.append("</div></li>")
    return "".join(parts)


def results_page(*cards: str, list_class: str = "jobs-search__results-list") -> str:
    return f"<html><body><ul class='{list_class}'>{''.join(cards)}</ul></body></html>"


@pytest.fixture
def fixture_html() -> str:
    return (FIXTURES / "linkedin_guest_results.html").read_text(encoding="utf-8")


# ---------------------------------------------------------------------
# Fake Playwright collaborators
# ---------------------------------------------------------------------
class FakePage:
    """Stands in for a Playwright page, backed by a static HTML document."""

    def __init__(
        self,
        html: str = "",
        url: str = SEARCH_URL,
        *,
        goto_error: Optional[Exception] = None,
        evaluate_error: Optional[Exception] = None,
        screenshot_error: Optional[Exception] = None,
        status: int = 200,
    ):
        self.html = html
        self.url = url
        self.goto_error = goto_error
        self.evaluate_error = evaluate_error
        self.screenshot_error = screenshot_error
        self.status = status
        self.gotos: list[dict] = []
        self.waited_for: list[str] = []
        self.delays: list[int] = []
        self.evaluations = 0
        self.screenshots: list[str] = []

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def goto(self, url, wait_until=None, timeout=None):
        self.gotos.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url
        return types.SimpleNamespace(status=self.status)

    def wait_for_selector(self, selector, state="visible", timeout=30000):
        self.waited_for.append(selector)
        element = self._soup().select_one(selector)
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector!r}")
        return element

    def query_selector(self, selector):
        return self._soup().select_one(selector)

    def wait_for_timeout(self, timeout):
        self.delays.append(timeout)

    def evaluate(self, expression, arg=None):
        self.evaluations += 1
        if self.evaluate_error is not None:
            raise self.evaluate_error
        return query_snapshot(self.html, self.url, arg)

    def screenshot(self, path=None, **kwargs):
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.screenshots.append(path)
        return b""

    def content(self):
        return self.html


class FakeSession:
    """Stands in for BrowserSession; counts releases."""

    def __init__(self, page: FakePage, *, pages_error: Optional[Exception] = None):
        self.page = page
        self.pages_error = pages_error
        self.opened: list[FakePage] = []
        self.release_count = 0

    def new_page(self):
        self.opened.append(self.page)
        return self.page

    def pages(self):
        if self.pages_error is not None:
            raise self.pages_error
        return list(self.opened)

    def release(self):
        self.release_count += 1


@pytest.fixture
def make_config(tmp_path):
    """Build a ConfigLoader from a dict written to a temp settings.yaml."""

    def _make(extra: Optional[dict] = None, overrides: Optional[dict] = None):
        data = {
            "content_ready": {"timeout": 1, "fallback_delay": 3},
            "diagnostics": {"screenshot_path": str(tmp_path / "shot.png")},
            "logging": {"log_file": str(tmp_path / "logs" / "probe.log")},
        }
        for section, values in (extra or {}).items():
            data.setdefault(section, {}).update(values)
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return load_config(str(path), overrides)

    return _make
