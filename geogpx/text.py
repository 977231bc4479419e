"""
geogpx — Text helpers

Whitespace trimming, dotted-version comparison, numeric entity encoding and
the two timestamp formats GPX files carry.
"""

from __future__ import annotations
import calendar
import re
from datetime import datetime, timezone
from decimal import Decimal
from functools import lru_cache
from typing import Optional, Pattern, Union

from dateutil.parser import isoparse

from .errors import UnparsableTimestamp

# Characters replaced by numeric character references, as regex class bodies.
DEFAULT_UNSAFE_CHARS = '<&>"'
# Everything except printable ASCII that is safe in markup, plus tab/CR/LF.
LEGACY_UNSAFE_CHARS = "^\n\r\t !#$%(-;=?-~"

_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")
_WS_RE = re.compile(r"\s+")

Timestamp = Union[int, float, datetime]


def trim(s: Optional[str]) -> str:
    """Strip ``s`` and collapse every interior whitespace run to one space."""
    if not s:
        return ""
    return _WS_RE.sub(" ", s.strip())


# ─────────────────────────────────────────────────────────────
# Versions
# ─────────────────────────────────────────────────────────────

def is_version(v: Optional[str]) -> bool:
    return bool(v and _VERSION_RE.fullmatch(v))


def cmp_ver(v1: str, v2: str) -> int:
    """
    Compare two dotted-numeric versions component by component.

    Missing trailing components count as 0, so ``"1.1.0"`` equals ``"1.1"``.
    Returns -1, 0 or 1.
    """
    a = [int(p) for p in v1.split(".")]
    b = [int(p) for p in v2.split(".")]
    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))
    return (a > b) - (a < b)


# ─────────────────────────────────────────────────────────────
# Entity encoding
# ─────────────────────────────────────────────────────────────

@lru_cache(maxsize=16)
def unsafe_pattern(unsafe: Optional[str] = None) -> Pattern:
    """Compile a character-class body into the pattern used for encoding."""
    return re.compile(f"[{unsafe if unsafe is not None else DEFAULT_UNSAFE_CHARS}]")


def encode_entities(text: str, unsafe: Optional[str] = None) -> str:
    """
    Replace each character of the unsafe class with ``&#xHH;``.

    Only the listed characters are touched; accented and other non-ASCII text
    passes through unless the legacy class is requested. An empty class
    encodes nothing.
    """
    if unsafe == "":
        return text
    return unsafe_pattern(unsafe).sub(lambda m: f"&#x{ord(m.group(0)):X};", text)


def format_value(value) -> str:
    """
    Scalar to element text. ``45.0`` renders as ``45``; floats never use
    exponent notation (``-1e-05`` renders as ``-0.00001``).
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        text = repr(value)
        if "e" in text:
            text = format(Decimal(text), "f")
        return text
    return str(value)


# ─────────────────────────────────────────────────────────────
# Timestamps
# ─────────────────────────────────────────────────────────────

def parse_time(text: str, use_datetime: bool = False) -> Timestamp:
    """
    Parse an ISO-8601 timestamp.

    Returns integer epoch seconds, or a timezone-aware ``datetime`` when
    ``use_datetime`` is set. Times without an offset are taken as UTC.
    """
    try:
        dt = isoparse(text)
    except (ValueError, OverflowError, TypeError):
        raise UnparsableTimestamp(text) from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if use_datetime:
        return dt
    return calendar.timegm(dt.utctimetuple())


def format_time(tm: Timestamp, legacy: bool = False) -> str:
    """
    Render a timestamp the way GPX writers expect.

    The standard form is ``2006-11-25T21:01:43+00:00``; the legacy form adds
    seven fractional digits: ``2006-11-25T21:01:43.0000000+00:00``.
    """
    if isinstance(tm, datetime):
        dt = tm if tm.tzinfo is not None else tm.replace(tzinfo=timezone.utc)
    else:
        dt = datetime.fromtimestamp(tm, tz=timezone.utc)

    stamp = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if legacy:
        stamp += f".{dt.microsecond:06d}0"
    stamp += dt.strftime("%z")
    return re.sub(r"(\d{2})$", r":\1", stamp)
