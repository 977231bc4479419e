"""
geogpx — GPX writer

One recursive routine renders every field. What varies by element lives in
two tables (which keys become attributes, which keys come first) and in a
small registry of per-field encoders built afresh for each ``serialize``
call, so nothing is kept between calls.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Mapping, Optional

from .models import (
    Author, Document, Email, Link, Point, POINT_FIELDS,
    RawXml, Rendered, Route, Segment, Track,
)
from .text import cmp_ver, encode_entities, format_time, format_value, is_version

logger = logging.getLogger(__name__)

CREATOR = "geogpx"

# Keys written as XML attributes, per element.
_POINT_ATTR = re.compile(r"^(?:lat|lon)$")
AS_ATTR = {
    "wpt": _POINT_ATTR,
    "rtept": _POINT_ATTR,
    "trkpt": _POINT_ATTR,
    "email": re.compile(r"^(?:id|domain)$"),
    "link": re.compile(r"^href$"),
}

# Child elements written first, in this order; the rest follow sorted.
_ROUTE_ORDER = ("name", "cmt", "desc", "src", "link", "number", "type", "extensions")
KEY_ORDER = {
    "wpt": POINT_FIELDS,
    "rtept": POINT_FIELDS,
    "trkpt": POINT_FIELDS,
    "rte": _ROUTE_ORDER + ("points",),
    "trk": _ROUTE_ORDER + ("segments",),
    "trkseg": ("points", "extensions"),
    "author": ("name", "email", "link"),
    "link": ("text", "type"),
}

# Document lists and how their keys are named in XML.
GROUPS = (
    ("waypoints", {"waypoints": "wpt"}),
    ("routes", {"routes": "rte", "points": "rtept"}),
    ("tracks", {"tracks": "trk", "segments": "trkseg", "points": "trkpt"}),
)

_RECORDS = (Point, Route, Segment, Track, Author, Link, Email)


@dataclass
class SerializeOptions:
    """
    Output settings.

    ``unsafe_chars`` is a regex character-class body listing the characters
    to encode; None means ``< & > "``. ``legacy_time`` None follows
    ``Document.legacy``.
    """
    version: Optional[str] = None
    unsafe_chars: Optional[str] = None
    legacy_time: Optional[bool] = None
    creator: str = CREATOR


@dataclass
class _Context:
    version: str
    unsafe: Optional[str]
    legacy_time: bool
    encoders: Dict[str, Callable] = field(default_factory=dict)

    def enc(self, value) -> str:
        return encode_entities(format_value(value), self.unsafe)


def effective_version(requested: Optional[str]) -> str:
    """Resolve the output version; anything from 1.1 up is written as 1.1."""
    version = requested or "1.0"
    if not is_version(version):
        logger.warning("Unknown GPX version %r, writing 1.0", version)
        return "1.0"
    if cmp_ver(version, "1.1") >= 0:
        return "1.1"
    return version


def _fields(value) -> Optional[Mapping]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, _RECORDS):
        return value.to_dict()
    return None


# ─────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────

def _tag(ctx: _Context, name: str, attr: Optional[Mapping] = None, *content: str) -> str:
    parts = ["<", name]
    for k in sorted(attr or {}):
        parts += [" ", k, '="', ctx.enc(attr[k]), '"']
    if content:
        parts += [">", *content, "</", name, ">\n"]
    else:
        parts.append(" />\n")
    return "".join(parts)


def _xml(ctx: _Context, name: str, value, name_map: Optional[Mapping] = None) -> str:
    name_map = name_map or {}
    tag = name_map.get(name, name)

    if isinstance(value, Rendered):
        return value.render(name)

    encoder = ctx.encoders.get(name)
    if encoder is not None:
        return encoder(ctx, name, value)

    fields = _fields(value)
    if fields is not None:
        attr = {}
        cont = ["\n"]
        as_attr = AS_ATTR.get(name)
        v = dict(fields)
        for k in list(KEY_ORDER.get(name, ())) + sorted(v):
            vv = v.pop(k, None)
            if vv is None:
                continue
            if as_attr is not None and as_attr.match(k):
                attr[k] = vv
            else:
                cont.append(_xml(ctx, k, vv, name_map))
        return _tag(ctx, tag, attr, *cont)

    if isinstance(value, (list, tuple)):
        return "".join(_xml(ctx, tag, item, name_map) for item in value)

    if isinstance(value, RawXml):
        return _tag(ctx, tag, {}, value.xml)

    return _tag(ctx, tag, {}, ctx.enc(value))


# ─────────────────────────────────────────────────────────────
# Field encoders
# ─────────────────────────────────────────────────────────────

def _encode_time(ctx, name, value):
    text = value if isinstance(value, str) else format_time(value, ctx.legacy_time)
    return _tag(ctx, name, {}, ctx.enc(text))


def _encode_keywords(ctx, name, value):
    text = value if isinstance(value, str) else ", ".join(value)
    return _tag(ctx, name, {}, ctx.enc(text))


def _encode_link_10(ctx, name, value):
    v = _fields(value)
    if v is None:
        return _tag(ctx, name, {}, ctx.enc(value))
    out = []
    if v.get("href") is not None:
        out.append(_xml(ctx, "url", v["href"]))
    if v.get("text") is not None:
        out.append(_xml(ctx, "urlname", v["text"]))
    return "".join(out)


def _encode_email_10(ctx, name, value):
    v = _fields(value)
    if v is None:
        return _tag(ctx, "email", {}, ctx.enc(value))
    if v.get("id") is None or v.get("domain") is None:
        return ""
    return _tag(ctx, "email", {}, ctx.enc(f"{v['id']}@{v['domain']}"))


def _encode_author_10(ctx, name, value):
    v = _fields(value)
    if v is None:
        return _tag(ctx, name, {}, ctx.enc(value))
    out = []
    if v.get("name") is not None:
        out.append(_tag(ctx, "author", {}, ctx.enc(v["name"])))
    if v.get("email") is not None:
        out.append(_xml(ctx, "email", v["email"]))
    return "".join(out)


def build_encoders(version: str) -> Dict[str, Callable]:
    """Field encoders for one output version."""
    encoders = {"time": _encode_time, "keywords": _encode_keywords}
    if cmp_ver(version, "1.1") < 0:
        encoders.update(link=_encode_link_10, email=_encode_email_10, author=_encode_author_10)
    return encoders


# ─────────────────────────────────────────────────────────────
# Document
# ─────────────────────────────────────────────────────────────

def serialize(document: Document, options: Optional[SerializeOptions] = None, **overrides) -> str:
    """
    Render a document as GPX XML text.

    ``options`` fields can also be given as keyword arguments, which take
    precedence. The document is not modified.
    """
    opts = options or SerializeOptions()
    if overrides:
        opts = replace(opts, **overrides)

    version = effective_version(opts.version or document.version)
    legacy_time = document.legacy if opts.legacy_time is None else opts.legacy_time
    ctx = _Context(version, opts.unsafe_chars, legacy_time, build_encoders(version))

    ns = "http://www.topografix.com/GPX/" + version.replace(".", "/")
    schema = " ".join([ns, f"{ns}/gpx.xsd", *document.schema_urls])

    ret = [
        '<?xml version="1.0" encoding="utf-8"?>\n',
        '<gpx xmlns:xsd="http://www.w3.org/2001/XMLSchema" ',
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" ',
        f'version="{version}" creator="{ctx.enc(opts.creator)}" ',
        f'xsi:schemaLocation="{ctx.enc(schema)}" xmlns="{ns}">\n',
    ]

    meta = [_xml(ctx, k, v) for k, v in document.metadata().items()]
    bounds = document.bounds()
    if bounds:
        meta.append(_tag(ctx, "bounds", bounds))

    if version == "1.1":
        ret.append(_tag(ctx, "metadata", {}, "\n", *meta))
    else:
        ret.extend(meta)

    for key, name_map in GROUPS:
        items = getattr(document, key)
        if items:
            ret.append(_xml(ctx, key, items, name_map))

    ret.append("</gpx>\n")
    logger.debug("Serialized GPX %s: %d waypoints, %d routes, %d tracks", version,
                 len(document.waypoints), len(document.routes), len(document.tracks))
    return "".join(ret)
