# tests/test_navigator.py
import logging

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from conftest import SEARCH_URL, FakePage
from listing_probe.errors import NavigationError, NavigationFailure
from listing_probe.navigator import navigate


def test_navigation_waits_for_dom_content_loaded_only():
    page = FakePage()

    navigate(page, SEARCH_URL, 30000)

    assert page.gotos == [{"url": SEARCH_URL, "wait_until": "domcontentloaded", "timeout": 30000}]


def test_timeout_becomes_navigation_error():
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded."))

    with pytest.raises(NavigationError) as excinfo:
        navigate(page, SEARCH_URL, 30000)

    assert excinfo.value.reason is NavigationFailure.TIMEOUT
    assert excinfo.value.url == SEARCH_URL
    assert "did not load in time" in excinfo.value.cause


def test_network_failure_becomes_navigation_error():
    page = FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))

    with pytest.raises(NavigationError) as excinfo:
        navigate(page, SEARCH_URL, 30000)

    assert excinfo.value.reason is NavigationFailure.NETWORK_FAILURE
    assert "ERR_NAME_NOT_RESOLVED" in str(excinfo.value)


def test_navigation_is_attempted_once():
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout"))

    with pytest.raises(NavigationError):
        navigate(page, SEARCH_URL, 10)

    assert len(page.gotos) == 1


def test_http_error_status_is_logged_not_raised(caplog):
    page = FakePage(status=429)

    with caplog.at_level(logging.WARNING, logger="listing_probe.navigator"):
        navigate(page, SEARCH_URL, 30000)

    assert "HTTP 429" in caplog.text
