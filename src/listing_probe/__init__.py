"""Headless-browser job listing probe."""

__version__ = "0.1.0"
