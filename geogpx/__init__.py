"""
geogpx — GPX reader & writer
==========================================
Parse GPX 1.0 / 1.1 documents into plain Python objects and write them back,
keeping every field the format defines.

Quick start:
    geogpx route.gpx --info                  # CLI
    geogpx old.gpx new.gpx --gpx-version 1.1

Library:
    from geogpx import parse, serialize, read_file, write_file
    doc = read_file("route.gpx")
    xml = serialize(doc, version="1.1")
"""

from .errors import GpxError, MalformedDocument, InvalidPoint, UnparsableTimestamp
from .models import (
    Document, Point, Route, Track, Segment, Author, Link, Email, RawXml, Rendered,
)
from .text import DEFAULT_UNSAFE_CHARS, LEGACY_UNSAFE_CHARS, cmp_ver
from .parser import parse
from .serializer import SerializeOptions, serialize
from .files import read_file, write_file, convert

__version__ = "1.0.0"
__all__ = [
    "GpxError", "MalformedDocument", "InvalidPoint", "UnparsableTimestamp",
    "Document", "Point", "Route", "Track", "Segment", "Author", "Link", "Email",
    "RawXml", "Rendered", "DEFAULT_UNSAFE_CHARS", "LEGACY_UNSAFE_CHARS", "cmp_ver",
    "parse", "serialize", "SerializeOptions", "read_file", "write_file", "convert",
]
