# tests/test_content_ready.py
from playwright.sync_api import Error as PlaywrightError

from conftest import FakePage, card, results_page
from listing_probe.content_ready import wait_for_content
from listing_probe.selectors import READY_SELECTORS


def test_guest_results_list_wins_the_race():
    page = FakePage(results_page(card()))

    signal = wait_for_content(page, READY_SELECTORS, timeout_ms=10000)

    assert signal.matched is READY_SELECTORS[0]
    assert not signal.fell_back
    assert page.delays == []


def test_member_results_list_is_detected_too():
    page = FakePage(results_page(card(), list_class="jobs-search-results__list"))

    signal = wait_for_content(page, READY_SELECTORS, timeout_ms=10000)

    assert signal.matched is READY_SELECTORS[1]
    assert signal.label == "member-results"


def test_all_candidates_are_raced_in_one_wait():
    page = FakePage(results_page(card()))

    wait_for_content(page, READY_SELECTORS, timeout_ms=10000)

    assert page.waited_for == [".jobs-search__results-list, ul.jobs-search-results__list"]


def test_timeout_falls_back_to_fixed_delay_without_failing():
    page = FakePage("<html><body><div class='authwall'>Sign in</div></body></html>")

    signal = wait_for_content(page, READY_SELECTORS, timeout_ms=10000)

    assert signal.matched is None
    assert signal.fell_back
    assert page.delays == [3000]
    assert signal.label == "none (fallback delay)"


def test_custom_fallback_delay():
    page = FakePage("<html></html>")

    wait_for_content(page, READY_SELECTORS, timeout_ms=10, fallback_delay_ms=500)

    assert page.delays == [500]


def test_wait_errors_other_than_timeout_also_fall_back():
    class ClosedPage(FakePage):
        def wait_for_selector(self, selector, state="visible", timeout=30000):
            raise PlaywrightError("Target page, context or browser has been closed")

    page = ClosedPage("<html></html>")

    signal = wait_for_content(page, READY_SELECTORS, timeout_ms=10)

    assert signal.fell_back
    assert page.delays == [3000]
