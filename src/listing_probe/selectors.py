"""LinkedIn guest job-search selectors with fallbacks.

Each field lists alternatives in preference order; the first one that matches
inside a card wins.
"""

from listing_probe.models import FieldSelectors, ListingSelectors, SelectorFallbackSpec

# --- Results list is on the page ---
READY_SELECTORS: tuple[SelectorFallbackSpec, ...] = (
    SelectorFallbackSpec(name="guest-results", selectors=(".jobs-search__results-list",)),
    SelectorFallbackSpec(name="member-results", selectors=("ul.jobs-search-results__list",)),
)

# --- One card per listing ---
CONTAINER_SELECTORS = SelectorFallbackSpec(
    name="container",
    selectors=(
        ".jobs-search__results-list > li",
        "ul.jobs-search-results__list > li",
    ),
)

TITLE_SELECTORS = SelectorFallbackSpec(
    name="title",
    selectors=(".base-search-card__title", "h3.base-card__title"),
)

ORGANIZATION_SELECTORS = SelectorFallbackSpec(
    name="organization",
    selectors=(".base-search-card__subtitle", ".base-card__subtitle"),
)

LOCATION_SELECTORS = SelectorFallbackSpec(
    name="location",
    selectors=(".job-search-card__location", ".job-card-container__metadata-item"),
)

LINK_SELECTORS = SelectorFallbackSpec(
    name="link",
    selectors=("a.base-card__full-link", "a.base-card"),
)

DEFAULT_SELECTORS = ListingSelectors(
    ready=READY_SELECTORS,
    containers=CONTAINER_SELECTORS,
    fields=FieldSelectors(
        title=TITLE_SELECTORS,
        organization=ORGANIZATION_SELECTORS,
        location=LOCATION_SELECTORS,
        link=LINK_SELECTORS,
    ),
)
