"""Custom exception hierarchy for pysegment."""

from __future__ import annotations

from typing import Any


class SegmentError(Exception):
    """Base exception for all pysegment errors."""


class SegmentSetupError(SegmentError, NotImplementedError):
    """A segment is wired incorrectly.

    Raised when an abstract hook is reached without a concrete
    implementation, when two segments share an id, or when a fetch handler
    breaks the single-publish protocol.  These are programming errors and are
    never absorbed into segment state.
    """


class QueryIdError(SegmentError, ValueError):
    """A query description cannot be turned into a stable identity."""


class SegmentConfigError(SegmentError):
    """Invalid or missing configuration."""


class SegmentFetchError(SegmentError):
    """A fetch strategy failed.

    Fetch strategies may raise this to attach a structured ``errors``
    payload.  The fetch handler converts it into a terminal ``LOAD`` event
    instead of letting it reach the caller.
    """

    def __init__(self, message: str, *, errors: Any = None) -> None:
        self.errors = errors
        super().__init__(message)


class SegmentTransportError(SegmentFetchError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        path: str = "",
    ) -> None:
        self.status_code = status_code
        self.path = path
        super().__init__(message)
