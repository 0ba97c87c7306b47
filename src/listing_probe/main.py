#!/usr/bin/env python3

"""
Listing Probe - Main Entry Point
Headless-browser smoke test that extracts a few job listings
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from listing_probe.config_loader import load_config
from listing_probe.diagnostics import Reporter
from listing_probe.errors import ExtractionError
from listing_probe.extractor import extract_from_html
from listing_probe.pipeline import ProbeRunner


def setup_logging(config) -> None:
    """Configure logging for the application"""
    log_file = config.get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, config.get_log_level(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized: {log_file}")


def display_config(config) -> None:
    """Display loaded configuration"""
    print("\n" + "="*40)
    print("🤖 LISTING PROBE")
    print("="*40)

    print(f"\n🔍 Search: {config.get_search_query()}")
    print(f"📊 Max results: {config.get_max_results()}")

    session = config.session_config()
    print(f"\n⚙️  BROWSER SETTINGS:")
    print(f"  Headless mode: {session.headless}")
    print(f"  Executable: {session.executable_path or 'bundled'}")
    print(f"  Navigation timeout: {config.get_navigation_timeout()/1000}s")
    print(f"  Results wait: {config.get_ready_timeout()/1000}s (fallback {config.get_fallback_delay()/1000}s)")
    print(f"  Stealth: {session.use_stealth}")

    print(f"\n📸 Screenshot: {config.get_screenshot_path()} ({config.get_screenshot_policy()})")
    print("\n" + "="*40 + "\n")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Headless-browser job listing probe")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config YAML (built-in defaults when omitted)",
    )
    parser.add_argument("--keyword", help="Search keyword")
    parser.add_argument("--location", help="Search location")
    parser.add_argument("--limit", type=int, help="Max listings to extract")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    parser.add_argument(
        "--from-html",
        type=Path,
        help="Re-run extraction on a saved HTML snapshot instead of launching a browser",
    )
    parser.add_argument(
        "--base-url",
        default="https://www.linkedin.com/jobs/search/",
        help="URL used to resolve relative links in --from-html snapshots",
    )
    return parser.parse_args(argv)


def replay_snapshot(config, html_path: Path, base_url: str) -> int:
    """Extract listings from a saved page without a browser"""
    logger = logging.getLogger(__name__)
    reporter = Reporter()

    if not html_path.exists():
        print(f"❌ Error: snapshot not found: {html_path}")
        return 1

    print(f"📄 Replaying snapshot {html_path}")
    try:
        result = extract_from_html(
            html_path.read_text(encoding="utf-8"),
            base_url,
            config.get_selectors(),
            config.get_max_results(),
        )
    except ExtractionError as e:
        reporter.report(None, e)
        return 1

    reporter.report(result)
    logger.info(f"Snapshot replay complete: {len(result)} listings")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main execution function"""
    print("========================================")
    print("Listing Probe")
    print("========================================")
    load_dotenv(override=False)
    args = parse_args(argv)

    overrides = {
        "search.keyword": args.keyword,
        "search.location": args.location,
        "search.max_results": args.limit,
        "browser.headless": False if args.headed else None,
    }

    # Load configuration
    try:
        config = load_config(args.config, overrides)
    except FileNotFoundError as e:
        print(f"❌ Error: {e}")
        return 1
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        return 1

    # Setup logging
    setup_logging(config)
    logger = logging.getLogger(__name__)

    if args.from_html:
        return replay_snapshot(config, args.from_html, args.base_url)

    display_config(config)

    try:
        outcome = ProbeRunner(config).run()
    except Exception as e:
        logger.exception("Fatal error in probe")
        print(f"❌ Fatal error: {e}")
        return 1

    print("\nProbe completed")
    if outcome.succeeded:
        logger.info(f"Probe complete: {len(outcome.result)} listings")
        return 0
    logger.warning("Probe finished with errors")
    return 1


if __name__ == "__main__":
    sys.exit(main())
