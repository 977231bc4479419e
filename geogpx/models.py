"""
geogpx — Data models
Document, Point, Route, Track, Segment and the author/link/email records.

A Document owns its whole graph. Every record can be built directly, or from
the plain field mappings the parser produces via ``from_dict``; nested
mappings are coerced into records on construction.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from itertools import chain
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .errors import InvalidPoint

logger = logging.getLogger(__name__)

# Optional point fields in GPX schema order.
POINT_FIELDS = (
    "ele", "time", "magvar", "geoidheight", "name", "cmt", "desc", "src",
    "link", "sym", "type", "fix", "sat", "hdop", "vdop", "pdop",
    "ageofdgpsdata", "dgpsid", "extensions",
)

# Document metadata fields in output order.
META_FIELDS = ("name", "desc", "author", "time", "keywords", "copyright", "link")


def _present(pairs: Iterable) -> Dict[str, Any]:
    return {k: v for k, v in pairs if v is not None}


@dataclass(frozen=True)
class RawXml:
    """Inner XML of an ``<extensions>`` element, written back unescaped."""
    xml: str

    def __str__(self) -> str:
        return self.xml


@dataclass(frozen=True)
class Rendered:
    """
    A value that renders itself.

    ``render(tag)`` must return the complete element text. Only meant for
    legacy waypoint objects: the callable is trusted to add its own wrapper,
    which is why it is not used for route or track points.
    """
    render: Callable[[str], str]
    lat: Optional[float] = None
    lon: Optional[float] = None


# ─────────────────────────────────────────────────────────────
# Author / Link / Email
# ─────────────────────────────────────────────────────────────

@dataclass
class Email:
    id: str
    domain: str

    def __str__(self) -> str:
        return f"{self.id}@{self.domain}"

    @classmethod
    def parse(cls, text: str) -> Optional[Email]:
        """Split ``local@domain``; anything else gives None."""
        local, sep, domain = text.rpartition("@")
        if not sep or not local or not domain:
            return None
        return cls(local, domain)

    @classmethod
    def from_dict(cls, data: Mapping) -> Optional[Email]:
        if data.get("id") is None or data.get("domain") is None:
            logger.debug("Dropping incomplete email %r", dict(data))
            return None
        return cls(data["id"], data["domain"])

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "domain": self.domain}


@dataclass
class Link:
    href: Optional[str] = None
    text: Optional[str] = None
    type: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping) -> Link:
        rest = dict(data)
        return cls(rest.pop("href", None), rest.pop("text", None), rest.pop("type", None), rest)

    def to_dict(self) -> Dict[str, Any]:
        out = _present([("href", self.href), ("text", self.text), ("type", self.type)])
        out.update(self.extras)
        return out


@dataclass
class Author:
    name: Optional[str] = None
    email: Optional[Email] = None
    link: Optional[Link] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.email, Mapping):
            self.email = Email.from_dict(self.email)
        elif isinstance(self.email, str):
            self.email = Email.parse(self.email)
        if isinstance(self.link, Mapping):
            self.link = Link.from_dict(self.link)

    @classmethod
    def from_dict(cls, data: Mapping) -> Author:
        rest = dict(data)
        return cls(rest.pop("name", None), rest.pop("email", None), rest.pop("link", None), rest)

    def to_dict(self) -> Dict[str, Any]:
        out = _present([("name", self.name), ("email", self.email), ("link", self.link)])
        out.update(self.extras)
        return out


# ─────────────────────────────────────────────────────────────
# Points
# ─────────────────────────────────────────────────────────────

def _coordinate(name: str, value) -> float:
    if value is None:
        raise InvalidPoint(f"'{name}' is mandatory for a point")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidPoint(f"'{name}' is not a number: {value!r}") from None


# Numeric point fields and their types; values that don't convert are kept.
NUMERIC_FIELDS = {
    "ele": float, "magvar": float, "geoidheight": float, "hdop": float,
    "vdop": float, "pdop": float, "ageofdgpsdata": float,
    "sat": int, "dgpsid": int,
}


def _number(kind, value):
    if value is None or isinstance(value, (bool, kind)):
        return value
    try:
        return kind(value)
    except (TypeError, ValueError):
        return value


@dataclass
class Point:
    """A waypoint, route point or track point. ``lat``/``lon`` are required."""
    lat: float = None
    lon: float = None
    ele: Any = None
    time: Any = None
    magvar: Any = None
    geoidheight: Any = None
    name: Optional[str] = None
    cmt: Optional[str] = None
    desc: Optional[str] = None
    src: Optional[str] = None
    link: Optional[Link] = None
    sym: Optional[str] = None
    type: Optional[str] = None
    fix: Optional[str] = None
    sat: Any = None
    hdop: Any = None
    vdop: Any = None
    pdop: Any = None
    ageofdgpsdata: Any = None
    dgpsid: Any = None
    extensions: Any = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.lat = _coordinate("lat", self.lat)
        self.lon = _coordinate("lon", self.lon)
        for name, kind in NUMERIC_FIELDS.items():
            setattr(self, name, _number(kind, getattr(self, name)))
        if isinstance(self.link, Mapping):
            self.link = Link.from_dict(self.link)

    @classmethod
    def from_dict(cls, data: Mapping) -> Point:
        """Build a point from a field mapping; unknown keys land in ``extras``."""
        rest = dict(data)
        known = {k: rest.pop(k) for k in ("lat", "lon") + POINT_FIELDS if k in rest}
        return cls(extras=rest, **known)

    def to_dict(self) -> Dict[str, Any]:
        out = {"lat": self.lat, "lon": self.lon}
        out.update(_present((k, getattr(self, k)) for k in POINT_FIELDS))
        out.update(self.extras)
        return out


def as_point(value) -> Union[Point, Rendered]:
    if isinstance(value, (Point, Rendered)):
        return value
    if isinstance(value, Mapping):
        return Point.from_dict(value)
    raise InvalidPoint(f"Not a point: {value!r}")


def _nested_point(value) -> Point:
    """Route and segment points; self-rendering values are waypoint-only."""
    if isinstance(value, Rendered):
        raise InvalidPoint("Rendered values are only allowed as waypoints")
    return as_point(value)


def _coerce_link(fields: Dict[str, Any]):
    if isinstance(fields.get("link"), Mapping):
        fields["link"] = Link.from_dict(fields["link"])


# ─────────────────────────────────────────────────────────────
# Routes and tracks
# ─────────────────────────────────────────────────────────────

class _PointList:
    """List behaviour shared by routes and segments."""

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index) -> Point:
        return self.points[index]

    def append(self, point):
        self.points.append(_nested_point(point))


@dataclass
class Route(_PointList):
    name: Optional[str] = None
    points: List[Point] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.points = [_nested_point(p) for p in self.points]
        _coerce_link(self.fields)

    @classmethod
    def from_dict(cls, data: Mapping) -> Route:
        rest = dict(data)
        return cls(rest.pop("name", None), rest.pop("points", None) or [], rest)

    def to_dict(self) -> Dict[str, Any]:
        out = _present([("name", self.name)])
        out.update(self.fields)
        out["points"] = self.points
        return out


@dataclass
class Segment(_PointList):
    points: List[Point] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.points = [_nested_point(p) for p in self.points]

    @classmethod
    def from_dict(cls, data: Mapping) -> Segment:
        rest = dict(data)
        return cls(rest.pop("points", None) or [], rest)

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out["points"] = self.points
        return out


@dataclass
class Track:
    name: Optional[str] = None
    segments: List[Segment] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.segments = [s if isinstance(s, Segment) else Segment.from_dict(s)
                         for s in self.segments]
        _coerce_link(self.fields)

    def __len__(self) -> int:
        return sum(len(s) for s in self.segments)

    @classmethod
    def from_dict(cls, data: Mapping) -> Track:
        rest = dict(data)
        return cls(rest.pop("name", None), rest.pop("segments", None) or [], rest)

    def to_dict(self) -> Dict[str, Any]:
        out = _present([("name", self.name)])
        out.update(self.fields)
        out["segments"] = self.segments
        return out

    def iterate_points(self) -> Iterator[Point]:
        return chain.from_iterable(s.points for s in self.segments)


# ─────────────────────────────────────────────────────────────
# Document
# ─────────────────────────────────────────────────────────────

LEGACY_SCHEMA_URLS = [
    "http://www.groundspeak.com/cache/1/0",
    "http://www.groundspeak.com/cache/1/0/cache.xsd",
]


@dataclass
class Document:
    """
    A GPX document.

    ``schema_urls`` holds extension schema locations echoed after the GPX
    namespace in ``xsi:schemaLocation``. ``extras`` collects unrecognised
    root-level fields from parsing; they are kept but never written.
    """
    version: str = "1.0"
    name: Optional[str] = None
    desc: Optional[str] = None
    author: Optional[Author] = None
    time: Any = None
    keywords: Optional[List[str]] = None
    copyright: Optional[str] = None
    link: Optional[Link] = None
    waypoints: List[Union[Point, Rendered]] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    tracks: List[Track] = field(default_factory=list)
    schema_urls: List[str] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)
    declared_bounds: Optional[Dict[str, Any]] = field(default=None, compare=False)
    legacy: bool = field(default=False, compare=False)

    def __post_init__(self):
        if isinstance(self.author, Mapping):
            self.author = Author.from_dict(self.author)
        if isinstance(self.link, Mapping):
            self.link = Link.from_dict(self.link)
        self.waypoints = [as_point(p) for p in self.waypoints]
        self.routes = [r if isinstance(r, Route) else Route.from_dict(r) for r in self.routes]
        self.tracks = [t if isinstance(t, Track) else Track.from_dict(t) for t in self.tracks]

    @classmethod
    def from_dict(cls, data: Mapping) -> Document:
        rest = dict(data)
        kwargs = {k: rest.pop(k) for k in ("version",) + META_FIELDS if k in rest}
        return cls(
            waypoints=rest.pop("waypoints", None) or [],
            routes=rest.pop("routes", None) or [],
            tracks=rest.pop("tracks", None) or [],
            schema_urls=rest.pop("schema_urls", None) or [],
            declared_bounds=rest.pop("bounds", None),
            extras=rest,
            **kwargs,
        )

    @classmethod
    def legacy_container(cls, points: Iterable) -> Document:
        """
        Geocache-style document: Groundspeak author, keywords and cache
        schema, and the legacy timestamp format.
        """
        return cls(
            desc="GPX file generated by geogpx",
            author=Author("Groundspeak", Email("contact", "groundspeak.com")),
            keywords=["cache", "geocache", "groundspeak"],
            waypoints=list(points),
            schema_urls=list(LEGACY_SCHEMA_URLS),
            legacy=True,
        )

    def metadata(self) -> Dict[str, Any]:
        """Present metadata fields in output order."""
        return _present((k, getattr(self, k)) for k in META_FIELDS)

    # ─── Waypoints ────────────────────────────────────────────

    def add_waypoint(self, *wpts):
        """Append points; mappings must carry both ``lat`` and ``lon``."""
        for wpt in wpts:
            self.waypoints.append(as_point(wpt))

    def set_waypoints(self, wpts: Iterable):
        self.waypoints = [as_point(p) for p in wpts]

    # ─── Iteration ────────────────────────────────────────────

    def iterate_waypoints(self) -> Iterator:
        return iter(list(self.waypoints))

    def iterate_routepoints(self) -> Iterator[Point]:
        return chain.from_iterable(r.points for r in self.routes)

    def iterate_trackpoints(self) -> Iterator[Point]:
        return chain.from_iterable(t.iterate_points() for t in self.tracks)

    def iterate_points(self) -> Iterator:
        """Waypoints, then route points, then track points."""
        return chain(self.iterate_waypoints(), self.iterate_routepoints(),
                     self.iterate_trackpoints())

    def bounds(self, points: Optional[Iterable] = None) -> Dict[str, float]:
        """
        Bounding box of ``points`` (default: every point in the document).

        Returns ``{}`` when there is nothing to measure, otherwise exactly
        ``minlat``, ``minlon``, ``maxlat`` and ``maxlon``.
        """
        if points is None:
            points = self.iterate_points()
        minlat = minlon = maxlat = maxlon = None
        for pt in points:
            lat, lon = _coords(pt)
            if lat is None or lon is None:
                continue
            if minlat is None:
                minlat = maxlat = lat
                minlon = maxlon = lon
                continue
            minlat, maxlat = min(minlat, lat), max(maxlat, lat)
            minlon, maxlon = min(minlon, lon), max(maxlon, lon)
        if minlat is None:
            return {}
        return {"minlat": minlat, "minlon": minlon, "maxlat": maxlat, "maxlon": maxlon}


def _coords(pt):
    if isinstance(pt, Mapping):
        return pt.get("lat"), pt.get("lon")
    return getattr(pt, "lat", None), getattr(pt, "lon", None)
