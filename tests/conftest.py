"""Shared GPX samples."""

import pytest

GPX_10 = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.0" creator="ExpertGPS 1.1"
  xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
  xmlns="http://www.topografix.com/GPX/1/0"
  xsi:schemaLocation="http://www.topografix.com/GPX/1/0 http://www.topografix.com/GPX/1/0/gpx.xsd">
  <name>Dales walk</name>
  <desc>Across the   tops</desc>
  <author>Andy Armstrong</author>
  <email>andy@hexten.net</email>
  <url>http://hexten.net/</url>
  <urlname>Hexten</urlname>
  <time>2006-11-25T21:01:43Z</time>
  <keywords>bleak, cold ,scary</keywords>
  <bounds minlat="54.0" minlon="-3.0" maxlat="55.0" maxlon="-2.0"/>
  <wpt lat="54.786989" lon="-2.344214">
    <ele>512</ele>
    <time>2006-11-25T21:01:43Z</time>
    <name>My house &amp; home</name>
    <cmt>Where I live</cmt>
    <url>http://hexten.net/home</url>
    <urlname>Home</urlname>
    <sym>pin</sym>
  </wpt>
  <rte>
    <name>Route 1</name>
    <rtept lat="54.3286193447719" lon="-2.38972155527137"><name>WPT1</name></rtept>
    <rtept lat="54.6634365629388" lon="-2.55373552512617"><name>WPT2</name></rtept>
  </rte>
  <trk>
    <name>Track 1</name>
    <trkseg>
      <trkpt lat="54.5182217145253" lon="-2.62191579018834"><ele>300</ele></trkpt>
      <trkpt lat="54.1507759448355" lon="-3.05774931478646"/>
    </trkseg>
    <trkseg>
      <trkpt lat="54.6862790450185" lon="-3.68760108982739"/>
    </trkseg>
  </trk>
</gpx>
"""

GPX_11 = """<?xml version="1.0" encoding="utf-8"?>
<gpx xmlns="http://www.topografix.com/GPX/1/1"
  xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
  xmlns:gpxx="http://www.garmin.com/xmlschemas/GpxExtensions/v3"
  version="1.1" creator="test"
  xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd http://www.garmin.com/xmlschemas/GpxExtensions/v3 http://www.garmin.com/xmlschemas/GpxExtensionsv3.xsd">
  <metadata>
    <name>  Morning
      walk </name>
    <author>
      <name>Name</name>
      <email id="a" domain="b.com"/>
      <link href="http://example.com/"><text>Example</text></link>
    </author>
    <link href="http://example.org/"><text>Org</text><type>text/html</type></link>
    <time>2006-11-25T21:01:43Z</time>
    <keywords>hills, rain ,  fog</keywords>
    <bounds minlat="1" minlon="2" maxlat="3" maxlon="4"/>
  </metadata>
  <wpt lat="57.120939" lon="-2.9839832">
    <name>A</name>
    <time>not-a-date</time>
    <extensions><gpxx:WaypointExtension><gpxx:Proximity>10</gpxx:Proximity></gpxx:WaypointExtension></extensions>
  </wpt>
  <wpt lat="57.781729" lon="-1.230902"><name>B</name><foo>bar</foo></wpt>
  <rte><name>R</name><number>7</number><rtept lat="1" lon="2"/><rtept lat="3" lon="4"/></rte>
  <trk>
    <name>T</name>
    <trkseg><trkpt lat="5" lon="6"><ele>12.5</ele></trkpt></trkseg>
    <trkseg><trkpt lat="7" lon="8"/></trkseg>
  </trk>
</gpx>
"""


@pytest.fixture
def gpx10():
    return GPX_10


@pytest.fixture
def gpx11():
    return GPX_11
