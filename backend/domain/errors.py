"""
Errors raised by the dump composition flow.

Every error carries a user-facing message in `str(err)` plus the
structured values the caller needs to display it.
"""
from typing import Optional


class DumpError(Exception):
    """Base class for photo dump errors."""


class InsufficientPhotos(DumpError):
    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"at least {required} photos are needed, only {available} uploaded"
        )


class SelectionFull(DumpError):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"you may select exactly {limit} photos")


class IncompleteSelection(DumpError):
    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(
            f"select exactly {required} photos ({actual} selected)"
        )


class InvalidSelection(DumpError):
    """Selection holds duplicates or photos that do not belong to the event."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class UnsupportedLayout(DumpError, ValueError):
    def __init__(self, layout: object):
        self.layout = layout
        super().__init__(f"Unsupported layout: {layout!r}")


class MissingEvent(DumpError):
    def __init__(self, event_id: Optional[str] = None):
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id}" if event_id else "Event not found")


class InvalidEvent(DumpError, ValueError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class PersistenceError(DumpError):
    """The store failed to read or write; nothing was persisted."""
