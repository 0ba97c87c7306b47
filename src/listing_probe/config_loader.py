"""
Configuration loader for Listing Probe
Reads and validates settings.yaml
"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import logging

from listing_probe.models import (
    DEFAULT_SEARCH_URL,
    DEFAULT_USER_AGENT,
    FieldSelectors,
    ListingSelectors,
    SearchQuery,
    SelectorFallbackSpec,
    SessionConfig,
    Viewport,
)
from listing_probe.selectors import DEFAULT_SELECTORS

logger = logging.getLogger(__name__)

EXECUTABLE_PATH_ENV = "BROWSER_EXECUTABLE_PATH"
SCREENSHOT_POLICIES = ("always", "failure")


class ConfigValidationError(ValueError):
    """Raised when configuration fails invariant validation."""


def _validate_positive(value: Any, field: str) -> None:
    """Validate that a numeric value is positive (> 0)."""
    if value is not None and float(value) <= 0:
        raise ConfigValidationError(
            f"Invalid config: '{field}' must be positive (> 0), got {value}"
        )


def _validate_non_negative(value: Any, field: str) -> None:
    """Validate that a numeric value is non-negative."""
    if value is not None and float(value) < 0:
        raise ConfigValidationError(
            f"Invalid config: '{field}' must be non-negative, got {value}"
        )


def _validate_choice(value: Any, field: str, choices: tuple) -> None:
    if value is not None and value not in choices:
        raise ConfigValidationError(
            f"Invalid config: '{field}' must be one of {', '.join(choices)}, got {value}"
        )


class ConfigLoader:
    """Loads and validates configuration from YAML file"""

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config: Dict[str, Any] = {}
        self._load()
        for key, value in (overrides or {}).items():
            self.set(key, value)
        self._validate_invariants()

    def _load(self) -> None:
        """Load config from YAML file"""
        if self.config_path is None:
            logger.info("No config file given, using built-in defaults")
            return
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f) or {}
            logger.info(f"✓ Config loaded from {self.config_path}")
        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}")
            raise

    def _validate_invariants(self) -> None:
        """Validate configuration invariants. Raises ConfigValidationError on failure."""
        _validate_positive(self.get('search.max_results'), 'search.max_results')

        _validate_positive(self.get('browser.navigation_timeout'), 'browser.navigation_timeout')
        _validate_positive(self.get('browser.launch_timeout'), 'browser.launch_timeout')
        _validate_positive(self.get('browser.viewport.width'), 'browser.viewport.width')
        _validate_positive(self.get('browser.viewport.height'), 'browser.viewport.height')

        _validate_positive(self.get('content_ready.timeout'), 'content_ready.timeout')
        _validate_non_negative(self.get('content_ready.fallback_delay'), 'content_ready.fallback_delay')

        _validate_choice(self.get('diagnostics.screenshot_on'), 'diagnostics.screenshot_on', SCREENSHOT_POLICIES)

        template = self.get_search_url_template()
        if "{keyword}" not in str(template):
            raise ConfigValidationError(
                "Invalid config: 'search.url_template' must contain a {keyword} placeholder"
            )
        try:
            self.get_search_query().build_url(template)
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise ConfigValidationError(
                f"Invalid config: 'search.url_template' only supports {{keyword}} and {{location}}: {e!r}"
            ) from e

        try:
            self.session_config()
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid config: browser: {e}") from e

        try:
            self.get_selectors()
        except ValueError as e:
            raise ConfigValidationError(f"Invalid config: selectors: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot notation (e.g., 'search.keyword')"""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k, default)
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set config value by dot notation; None leaves the value untouched"""
        if value is None:
            return
        keys = key.split('.')
        node = self.config
        for k in keys[:-1]:
            node = node.setdefault(k, {})
        node[keys[-1]] = value

    # === Search Config ===

    def get_keyword(self) -> str:
        """Get search keyword"""
        return str(self.get('search.keyword', 'devops'))

    def get_location(self) -> str:
        """Get search location"""
        return str(self.get('search.location', 'India'))

    def get_max_results(self) -> int:
        """Get max listings to extract from the first page"""
        return int(self.get('search.max_results', 2))

    def get_search_url_template(self) -> str:
        """Get search URL template with {keyword} and {location} placeholders"""
        return self.get('search.url_template', DEFAULT_SEARCH_URL)

    def get_search_query(self) -> SearchQuery:
        return SearchQuery(keyword=self.get_keyword(), location=self.get_location())

    # === Browser Config ===

    def is_headless(self) -> bool:
        """Check if browser should run in headless mode"""
        return bool(self.get('browser.headless', True))

    def get_browser_executable_path(self) -> str:
        """Get browser executable path override (environment wins over YAML)"""
        env_path = (os.getenv(EXECUTABLE_PATH_ENV) or "").strip()
        return env_path or (self.get('browser.executable_path', '') or '')

    def get_launch_args(self) -> List[str]:
        """Get Chromium command-line switches"""
        return list(self.get('browser.args', list(SessionConfig().launch_args)) or [])

    def get_viewport(self) -> Viewport:
        return Viewport(
            width=int(self.get('browser.viewport.width', 1366)),
            height=int(self.get('browser.viewport.height', 768)),
        )

    def get_user_agent(self) -> str:
        return self.get('browser.user_agent', DEFAULT_USER_AGENT)

    def get_navigation_timeout(self) -> int:
        """Get navigation timeout in milliseconds"""
        return int(float(self.get('browser.navigation_timeout', 30)) * 1000)

    def get_launch_timeout(self) -> int:
        """Get browser launch timeout in milliseconds"""
        return int(float(self.get('browser.launch_timeout', 60)) * 1000)

    def use_stealth(self) -> bool:
        """Check if Playwright stealth should be enabled"""
        return bool(self.get('browser.use_stealth', True))

    def session_config(self) -> SessionConfig:
        """Build the immutable launch settings for the session manager"""
        return SessionConfig(
            headless=self.is_headless(),
            executable_path=self.get_browser_executable_path() or None,
            launch_args=tuple(self.get_launch_args()),
            viewport=self.get_viewport(),
            user_agent=self.get_user_agent(),
            launch_timeout_ms=self.get_launch_timeout(),
            use_stealth=self.use_stealth(),
        )

    # === Content Ready Config ===

    def get_ready_timeout(self) -> int:
        """Get results-list wait timeout in milliseconds"""
        return int(float(self.get('content_ready.timeout', 10)) * 1000)

    def get_fallback_delay(self) -> int:
        """Get fixed delay used when no results selector shows up, in milliseconds"""
        return int(float(self.get('content_ready.fallback_delay', 3)) * 1000)

    # === Selectors Config ===

    def _selector_override(self, name: str, default: SelectorFallbackSpec) -> SelectorFallbackSpec:
        override = self.get(f'selectors.{name}')
        if not override:
            return default
        return SelectorFallbackSpec(name=name, selectors=override)

    def get_selectors(self) -> ListingSelectors:
        """Get selectors, with any per-field overrides from settings.yaml applied"""
        defaults = DEFAULT_SELECTORS
        ready_override = self.get('selectors.ready')
        if ready_override:
            ready = tuple(
                SelectorFallbackSpec(name=f"ready-{i}", selectors=candidate)
                for i, candidate in enumerate(ready_override, 1)
            )
        else:
            ready = defaults.ready

        return ListingSelectors(
            ready=ready,
            containers=self._selector_override('containers', defaults.containers),
            fields=FieldSelectors(
                title=self._selector_override('title', defaults.fields.title),
                organization=self._selector_override('organization', defaults.fields.organization),
                location=self._selector_override('location', defaults.fields.location),
                link=self._selector_override('link', defaults.fields.link),
            ),
        )

    # === Diagnostics Config ===

    def get_screenshot_path(self) -> Path:
        return Path(self.get('diagnostics.screenshot_path', 'render-test-screenshot.png'))

    def get_screenshot_policy(self) -> str:
        """'always' (every run) or 'failure' (failed runs only)"""
        return self.get('diagnostics.screenshot_on', 'always')

    def is_html_snapshot_enabled(self) -> bool:
        return bool(self.get('diagnostics.save_html', False))

    def get_html_snapshot_path(self) -> Path:
        return Path(self.get('diagnostics.html_path', 'render-test-page.html'))

    # === Logging Config ===

    def get_log_level(self) -> str:
        """Get logging level"""
        return str(self.get('logging.level', 'INFO')).upper()

    def get_log_file(self) -> Path:
        """Get log file path with timestamp"""
        template = self.get('logging.log_file', 'logs/listing_probe.log')
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = template.replace('{timestamp}', timestamp)
        return Path(filename)

    def __repr__(self) -> str:
        return f"<Config: keyword={self.get_keyword()}, location={self.get_location()}>"


# Convenience function
def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> ConfigLoader:
    """Load configuration from file"""
    return ConfigLoader(config_path, overrides)
