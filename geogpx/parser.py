"""
geogpx — GPX reader

The XML is loaded with defusedxml into an element tree, which serves as the
event source: every element supplies its name, its attributes and a walk over
its children. Each level of GPX nesting has its own small grammar, expressed
as a state machine: a ``ParseState`` names the scope, and a table maps the
child element names recognised in that scope to an action and the state the
action recurses into. Everything the tables do not mention becomes a plain
text field on the current context.
"""

from __future__ import annotations
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

import defusedxml.ElementTree as SafeET
from defusedxml import DefusedXmlException

from .errors import InvalidPoint, MalformedDocument, UnparsableTimestamp
from .models import Document, Email, Point, RawXml, Route, Track
from .text import cmp_ver, is_version, parse_time, trim

logger = logging.getLogger(__name__)

_GPX_NS_RE = re.compile(r"^\{http://www\.topografix\.com/GPX/[\d/]+\}")
_GPX_SCHEMA_RE = re.compile(r"^http://www\.topografix\.com/GPX/[\d/]+(?:/gpx\.xsd)?$")


class ParseState(Enum):
    ROOT = "root"
    METADATA = "metadata"
    AUTHOR = "author"
    LINK = "link"
    EMAIL = "email"
    ROUTE = "route"
    TRACK = "track"
    SEGMENT = "segment"
    POINT = "point"
    BOUNDS = "bounds"
    GENERIC = "generic"


class Action(Enum):
    FIELD = "field"                 # context[name] = trimmed text
    TIME = "time"                   # context["time"] = parsed timestamp
    TRANSPARENT = "transparent"     # walk children with the same context
    DEEP = "deep"                   # context[name] = deep-parsed mapping
    URL = "url"                     # context.link.href (1.0)
    URLNAME = "urlname"             # context.link.text (1.0)
    AUTHOR_NAME = "author_name"     # context.author.name (1.0)
    AUTHOR_EMAIL = "author_email"   # context.author.email (1.0)
    KEYWORDS = "keywords"           # document keywords
    WAYPOINT = "waypoint"           # document waypoints
    POINT = "point"                 # context.points
    ROUTE = "route"                 # document routes
    TRACK = "track"                 # document tracks
    SEGMENT = "segment"             # context.segments
    EXTENSIONS = "extensions"       # context.extensions, verbatim


Rule = Tuple[Action, ParseState]

# Rules active in every scope, whatever the version.
_COMMON_RULES: Dict[str, Rule] = {
    "time": (Action.TIME, ParseState.GENERIC),
    "keywords": (Action.KEYWORDS, ParseState.GENERIC),
    "bounds": (Action.DEEP, ParseState.BOUNDS),
    "wpt": (Action.WAYPOINT, ParseState.POINT),
    "rtept": (Action.POINT, ParseState.POINT),
    "trkpt": (Action.POINT, ParseState.POINT),
    "rte": (Action.ROUTE, ParseState.ROUTE),
    "trk": (Action.TRACK, ParseState.TRACK),
    "extensions": (Action.EXTENSIONS, ParseState.GENERIC),
}

_V11_RULES: Dict[str, Rule] = {
    "metadata": (Action.TRANSPARENT, ParseState.METADATA),
    "author": (Action.DEEP, ParseState.AUTHOR),
    "link": (Action.DEEP, ParseState.LINK),
    "email": (Action.DEEP, ParseState.EMAIL),
}

_V10_RULES: Dict[str, Rule] = {
    "url": (Action.URL, ParseState.GENERIC),
    "urlname": (Action.URLNAME, ParseState.GENERIC),
    "author": (Action.AUTHOR_NAME, ParseState.GENERIC),
    "email": (Action.AUTHOR_EMAIL, ParseState.GENERIC),
}

# Rules that exist only inside one scope.
_STATE_RULES: Dict[ParseState, Dict[str, Rule]] = {
    ParseState.TRACK: {"trkseg": (Action.SEGMENT, ParseState.SEGMENT)},
}


def grammar(version: str) -> Dict[ParseState, Dict[str, Rule]]:
    """Build the per-state rule tables for a document version."""
    base = dict(_COMMON_RULES)
    base.update(_V11_RULES if cmp_ver(version, "1.1") >= 0 else _V10_RULES)
    return {state: {**base, **_STATE_RULES.get(state, {})} for state in ParseState}


def local_name(elem: ET.Element) -> str:
    return _GPX_NS_RE.sub("", elem.tag)


def element_text(elem: ET.Element) -> str:
    return trim("".join(elem.itertext()))


def inner_xml(elem: ET.Element) -> str:
    """Children of ``elem`` as XML text, GPX namespace stripped."""
    parts = [ET.tostring(child, encoding="unicode") for child in elem]
    return (escape(elem.text or "") + "".join(parts)).strip()


def _strip_gpx_namespace(root: ET.Element):
    for elem in root.iter():
        if isinstance(elem.tag, str):
            elem.tag = _GPX_NS_RE.sub("", elem.tag)


# ─────────────────────────────────────────────────────────────
# Walker
# ─────────────────────────────────────────────────────────────

@dataclass
class _Walker:
    """Per-parse state: the document mapping and the version's grammar."""
    version: str
    use_datetime: bool = False
    doc: Dict[str, Any] = field(default_factory=dict)
    rules: Dict[ParseState, Dict[str, Rule]] = field(default_factory=dict)

    def __post_init__(self):
        self.rules = grammar(self.version)
        self._actions: Dict[Action, Callable] = {
            Action.FIELD: self._on_field,
            Action.TIME: self._on_time,
            Action.TRANSPARENT: self._on_transparent,
            Action.DEEP: self._on_deep,
            Action.URL: self._on_url,
            Action.URLNAME: self._on_urlname,
            Action.AUTHOR_NAME: self._on_author_name,
            Action.AUTHOR_EMAIL: self._on_author_email,
            Action.KEYWORDS: self._on_keywords,
            Action.WAYPOINT: self._on_waypoint,
            Action.POINT: self._on_point,
            Action.ROUTE: self._on_route,
            Action.TRACK: self._on_track,
            Action.SEGMENT: self._on_segment,
            Action.EXTENSIONS: self._on_extensions,
        }

    def walk(self, elem: ET.Element, ctx: Dict[str, Any], state: ParseState):
        """Dispatch every child of ``elem`` through the rules of ``state``."""
        table = self.rules[state]
        for child in elem:
            if not isinstance(child.tag, str):
                continue
            name = child.tag
            action, child_state = table.get(name, (Action.FIELD, ParseState.GENERIC))
            self._actions[action](name, child, ctx, child_state)

    def deep(self, elem: ET.Element, state: ParseState) -> Dict[str, Any]:
        """Attributes become the initial mapping; children add or overwrite keys."""
        ob = dict(elem.attrib)
        self.walk(elem, ob, state)
        return ob

    def point(self, elem: ET.Element, state: ParseState) -> Optional[Point]:
        try:
            return Point.from_dict(self.deep(elem, state))
        except InvalidPoint as e:
            logger.warning("Skipping <%s>: %s", local_name(elem), e)
            return None

    # ─── Actions ──────────────────────────────────────────────

    def _on_field(self, name, elem, ctx, state):
        ctx[name] = element_text(elem)

    def _on_time(self, name, elem, ctx, state):
        text = element_text(elem)
        try:
            ctx[name] = parse_time(text, self.use_datetime)
        except UnparsableTimestamp as e:
            logger.debug("Ignoring <%s>: %s", name, e)

    def _on_transparent(self, name, elem, ctx, state):
        self.walk(elem, ctx, state)

    def _on_deep(self, name, elem, ctx, state):
        ctx[name] = self.deep(elem, state)

    def _on_url(self, name, elem, ctx, state):
        _sub(ctx, "link")["href"] = element_text(elem)

    def _on_urlname(self, name, elem, ctx, state):
        _sub(ctx, "link")["text"] = element_text(elem)

    def _on_author_name(self, name, elem, ctx, state):
        _sub(ctx, "author")["name"] = element_text(elem)

    def _on_author_email(self, name, elem, ctx, state):
        email = Email.parse(element_text(elem))
        if email is not None:
            _sub(ctx, "author")["email"] = email.to_dict()

    def _on_keywords(self, name, elem, ctx, state):
        words = [trim(k) for k in "".join(elem.itertext()).split(",")]
        while words and not words[-1]:
            words.pop()
        self.doc["keywords"] = words

    def _on_waypoint(self, name, elem, ctx, state):
        pt = self.point(elem, state)
        if pt is not None:
            self.doc.setdefault("waypoints", []).append(pt)

    def _on_point(self, name, elem, ctx, state):
        pt = self.point(elem, state)
        if pt is not None:
            ctx.setdefault("points", []).append(pt)

    def _on_route(self, name, elem, ctx, state):
        self.doc.setdefault("routes", []).append(Route.from_dict(self.deep(elem, state)))

    def _on_track(self, name, elem, ctx, state):
        tk: Dict[str, Any] = {}
        self.walk(elem, tk, state)
        self.doc.setdefault("tracks", []).append(Track.from_dict(tk))

    def _on_segment(self, name, elem, ctx, state):
        ctx.setdefault("segments", []).append(self.deep(elem, state))

    def _on_extensions(self, name, elem, ctx, state):
        ctx[name] = RawXml(inner_xml(elem))


def _sub(ctx: Dict[str, Any], key: str) -> Dict[str, Any]:
    sub = ctx.get(key)
    if not isinstance(sub, dict):
        sub = ctx[key] = {}
    return sub


# ─────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────

def _load(source) -> ET.Element:
    if hasattr(source, "read"):
        source = source.read()
    try:
        return SafeET.fromstring(source)
    except (ET.ParseError, DefusedXmlException) as e:
        raise MalformedDocument(f"Invalid GPX document: {e}") from e


def schema_urls(root: ET.Element) -> List[str]:
    """Extension schema locations, without the GPX namespace and XSD."""
    location = root.get("{http://www.w3.org/2001/XMLSchema-instance}schemaLocation", "")
    return [u for u in location.split() if not _GPX_SCHEMA_RE.match(u)]


def parse(source, use_datetime: bool = False) -> Document:
    """
    Parse a GPX document.

    Args:
        source: XML text, bytes, or an object with ``read()``
        use_datetime: return ``time`` values as aware datetimes instead of
            epoch seconds

    Raises:
        MalformedDocument: if the input is not well-formed XML or its root
            element is not ``gpx``
    """
    root = _load(source)
    _strip_gpx_namespace(root)
    if root.tag != "gpx":
        raise MalformedDocument(f"Root element is <{root.tag}>, expected <gpx>")

    version = root.get("version") or "1.0"
    if not is_version(version):
        logger.warning("Unreadable GPX version %r, reading as 1.0", version)
        version = "1.0"

    walker = _Walker(version, use_datetime)
    walker.doc["version"] = version
    walker.walk(root, walker.doc, ParseState.ROOT)

    urls = schema_urls(root)
    if urls:
        walker.doc["schema_urls"] = urls
    return Document.from_dict(walker.doc)
