"""
Run-level errors raised by the probe pipeline
"""

from enum import Enum


class ProbeError(Exception):
    """Base class for anticipated probe failures."""

    cause = "unexpected failure"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AcquisitionError(ProbeError):
    """Raised when the browser process cannot be started."""

    cause = "environment issue (browser could not be launched)"


class NavigationFailure(str, Enum):
    TIMEOUT = "timeout"
    NETWORK_FAILURE = "network_failure"


class NavigationError(ProbeError):
    """Raised when the results page never reaches DOMContentLoaded."""

    def __init__(self, url: str, reason: NavigationFailure, detail: str = "") -> None:
        message = f"Navigation to {url} failed ({reason.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.url = url
        self.reason = reason

    @property
    def cause(self) -> str:
        if self.reason is NavigationFailure.TIMEOUT:
            return "blocking or slow network (page did not load in time)"
        return "network or environment issue (page could not be reached)"


class ExtractionError(ProbeError):
    """Raised when the in-page listing query itself fails."""

    cause = "markup change or invalid selector"


class DiagnosticFailure(ProbeError):
    """Raised inside diagnostics capture; never escapes it."""

    cause = "diagnostics unavailable"
