"""
Round trips: documents built from GPX-defined fields survive
serialize -> parse unchanged, in both schema versions.
"""

import pytest

from geogpx import (
    Author, Document, Email, Link, Point, Route, Segment, Track, parse, serialize,
)
from geogpx.text import LEGACY_UNSAFE_CHARS

STAMP = 1164488503


def _waypoint(**extra):
    return Point(
        lat=54.786989, lon=-2.344214, ele=512, time=STAMP, magvar=0,
        geoidheight=0, name="My house & home", cmt="Where I live",
        desc="<<Chez moi>>", src="Testing", sym="pin", type="unknown",
        fix="dgps", sat=3, hdop=10, vdop=10.5, pdop=10,
        ageofdgpsdata=45, dgpsid=247, **extra,
    )


def _document(version, author_link=None, point_link=None, doc_link=None):
    return Document(
        version=version,
        name="Walk & talk",
        desc="Sörvágur, Færøerne",
        author=Author("Andy Armstrong", Email("andy", "hexten.net"), author_link),
        time=STAMP,
        keywords=["bleak", "cold", "scary"],
        copyright="(c) You Know Who",
        link=doc_link,
        waypoints=[_waypoint(link=point_link), Point(lat=57.781729, lon=-1.230902)],
        routes=[
            Route("Route 1", [
                Point(lat=54.3286193447719, lon=-2.38972155527137, name="WPT1"),
                Point(lat=54.6634365629388, lon=-2.55373552512617, name="WPT2"),
            ], {"desc": "first", "number": "1"}),
            Route("Route 2", [Point(lat=54.4165154835049, lon=-2.56153453279676)]),
        ],
        tracks=[
            Track("Track 1", [
                Segment([
                    Point(lat=54.5182217145253, lon=-2.62191579018834, ele=300, time=STAMP + 60),
                    Point(lat=54.1507759448355, lon=-3.05774931478646),
                ]),
                Segment([Point(lat=54.6862790450185, lon=-3.68760108982739)]),
            ]),
        ],
    )


class TestRoundTrip:

    def test_version_11(self):
        doc = _document(
            "1.1",
            author_link=Link("http://hexten.net/", "Hexten"),
            point_link=Link("http://hexten.net/", "Hexten", "Blah"),
            doc_link=Link("http://google.com/", "Google", "text/html"),
        )
        assert parse(serialize(doc)) == doc

    def test_version_10(self):
        doc = _document(
            "1.0",
            point_link=Link("http://hexten.net/", "Hexten"),
            doc_link=Link("http://google.com/", "Google"),
        )
        assert parse(serialize(doc)) == doc

    @pytest.mark.parametrize("version", ["1.0", "1.1"])
    def test_legacy_entities(self, version):
        doc = _document(version)
        assert parse(serialize(doc, unsafe_chars=LEGACY_UNSAFE_CHARS)) == doc

    @pytest.mark.parametrize("version", ["1.0", "1.1"])
    def test_numeric_point_fields(self, version):
        doc = Document(version=version, waypoints=[
            Point(lat=54.786989, lon=-2.344214, ele=512, sat=3, hdop=10.5, dgpsid=247),
        ])
        back = parse(serialize(doc))
        assert back == doc
        assert back.waypoints[0].sat == 3
        assert back.waypoints[0].hdop == 10.5

    def test_extra_fields(self):
        doc = Document(version="1.1", waypoints=[_waypoint(extras={"custom": "value"})])
        assert parse(serialize(doc)) == doc

    def test_parse_serialize_parse(self, gpx10, gpx11):
        for xml in (gpx10, gpx11):
            first = parse(xml)
            second = parse(serialize(first))
            assert second == first
            assert serialize(second) == serialize(first)

    def test_extensions_survive(self, gpx11):
        first = parse(gpx11)
        second = parse(serialize(first))
        assert second.waypoints[0].extensions == first.waypoints[0].extensions

    def test_upgrade_10_to_11(self, gpx10):
        doc = parse(gpx10)
        upgraded = parse(serialize(doc, version="1.1"))
        assert upgraded.version == "1.1"
        assert upgraded.author == doc.author
        assert upgraded.link == doc.link
        assert upgraded.waypoints == doc.waypoints
        assert upgraded.tracks == doc.tracks
