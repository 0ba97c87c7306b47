"""
Listing Extractor - bounded, fallback-tolerant card extraction

The same query runs two ways: inside the live page through a single
``page.evaluate`` call, or over a saved HTML snapshot with BeautifulSoup.
Both produce raw rows that go through one normalization step.
"""

import logging
from typing import Any, Dict, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.sync_api import Page
from playwright.sync_api import Error as PlaywrightError
from pydantic import ValidationError

from listing_probe.errors import ExtractionError
from listing_probe.models import ExtractionResult, ListingRecord, ListingSelectors

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 2

EXTRACT_SCRIPT = """
({ containers, fields, limit }) => {
  const pick = (root, selectors) => {
    for (const selector of selectors) {
      const el = root.querySelector(selector);
      if (el) return el;
    }
    return null;
  };
  const text = (el) => (el ? (el.textContent || '').trim() : '');
  const href = (el) => {
    if (!el) return '';
    if (typeof el.href === 'string' && el.href) return el.href;
    const raw = el.getAttribute('href');
    return raw ? new URL(raw, document.baseURI).href : '';
  };
  const cards = Array.from(document.querySelectorAll(containers.join(', '))).slice(0, limit);
  return {
    candidates: cards.length,
    rows: cards.map((card) => ({
      title: text(pick(card, fields.title)),
      organization: text(pick(card, fields.organization)),
      location: text(pick(card, fields.location)),
      link: href(pick(card, fields.link)),
    })),
  };
}
"""


def build_payload(selectors: ListingSelectors, limit: int) -> Dict[str, Any]:
    """JSON-serializable argument shared by the in-page and snapshot queries"""
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    fields = selectors.fields
    return {
        "containers": list(selectors.containers.selectors),
        "fields": {
            "title": list(fields.title.selectors),
            "organization": list(fields.organization.selectors),
            "location": list(fields.location.selectors),
            "link": list(fields.link.selectors),
        },
        "limit": limit,
    }


def _pick(card, selectors: List[str]):
    for selector in selectors:
        element = card.select_one(selector)
        if element is not None:
            return element
    return None


def _text(element) -> str:
    if element is None:
        return ""
    return element.get_text().strip()


def _href(element, base_url: str) -> str:
    if element is None:
        return ""
    raw = (element.get("href") or "").strip()
    if not raw:
        return ""
    return urljoin(base_url, raw)


def query_snapshot(html: str, base_url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Python rendition of EXTRACT_SCRIPT over a static HTML document"""
    soup = BeautifulSoup(html, "html.parser")
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base_url = urljoin(base_url, base_tag["href"])

    fields = payload["fields"]
    cards = soup.select(", ".join(payload["containers"]))[: payload["limit"]]
    return {
        "candidates": len(cards),
        "rows": [
            {
                "title": _text(_pick(card, fields["title"])),
                "organization": _text(_pick(card, fields["organization"])),
                "location": _text(_pick(card, fields["location"])),
                "link": _href(_pick(card, fields["link"]), base_url),
            }
            for card in cards
        ],
    }


def normalize_rows(raw: Dict[str, Any], limit: int) -> ExtractionResult:
    """Apply the title/link validity gate and build records in document order"""
    rows = list(raw.get("rows") or [])[:limit]
    candidates = min(int(raw.get("candidates", len(rows))), limit)

    records: List[ListingRecord] = []
    for index, row in enumerate(rows, 1):
        title = (row.get("title") or "").strip()
        link = (row.get("link") or "").strip()
        if not title or not link:
            logger.debug("Dropping card %s: missing %s", index, "title" if not title else "link")
            continue
        try:
            record = ListingRecord(
                title=title,
                organization=row.get("organization"),
                location=row.get("location"),
                link=link,
            )
        except ValidationError as exc:
            logger.warning("Dropping card %s: %s", index, exc.errors()[0].get("msg"))
            continue
        records.append(record)

    logger.info("Extracted %s/%s candidate cards", len(records), candidates)
    return ExtractionResult(records=records, limit=limit, candidates=candidates)


def extract(page: Page, selectors: ListingSelectors, limit: int = DEFAULT_LIMIT) -> ExtractionResult:
    """Run the listing query inside the page's document in one round trip."""
    payload = build_payload(selectors, limit)
    try:
        raw = page.evaluate(EXTRACT_SCRIPT, payload)
    except PlaywrightError as exc:
        raise ExtractionError(f"In-page listing query failed: {exc}") from exc
    if not isinstance(raw, dict):
        raise ExtractionError(f"In-page listing query returned {type(raw).__name__}, expected object")
    return normalize_rows(raw, limit)


def extract_from_html(
    html: str,
    base_url: str,
    selectors: ListingSelectors,
    limit: int = DEFAULT_LIMIT,
) -> ExtractionResult:
    """Run the listing query over a saved snapshot (e.g. a debug HTML dump)."""
    payload = build_payload(selectors, limit)
    try:
        raw = query_snapshot(html, base_url, payload)
    except Exception as exc:
        raise ExtractionError(f"Snapshot listing query failed: {exc}") from exc
    return normalize_rows(raw, limit)

