"""
geogpx — Exceptions

Structural failures (malformed XML, impossible points) are raised to the
caller. Field-level failures such as an unreadable timestamp are raised by the
helpers in ``text`` and absorbed by the parser.
"""


class GpxError(Exception):
    """Base class for all geogpx errors."""


class MalformedDocument(GpxError, ValueError):
    """The input is not a well-formed GPX document."""


class InvalidPoint(GpxError, ValueError):
    """A point was built without both ``lat`` and ``lon``."""


class UnparsableTimestamp(GpxError, ValueError):
    """A ``time`` value is not ISO-8601."""

    def __init__(self, text: str):
        super().__init__(f"Not an ISO-8601 timestamp: {text!r}")
        self.text = text
