#!/usr/bin/env python3
"""
geogpx — GPX Converter
================================
Read a GPX file, show what is in it, and write it back as GPX 1.0 or 1.1.

Usage:
    geogpx track.gpx --info                         # Show file info
    geogpx old.gpx new.gpx --gpx-version 1.1        # Upgrade 1.0 → 1.1
    geogpx in.gpx out.gpx --legacy-entities         # Encode all non-ASCII
    geogpx in.gpx out10.gpx out11.gpx --gpx-version 1.0
"""

from __future__ import annotations
import argparse
import logging
import sys

from .errors import GpxError
from .files import SOFT_FULL_NAME, read_file, write_file
from .models import Document
from .serializer import effective_version
from .text import LEGACY_UNSAFE_CHARS


def show_info(doc: Document, filepath: str = ""):
    """Display information about a GPX document."""
    if filepath:
        print(f"\n📁 File: {filepath}")
    print(f"   GPX version: {doc.version}")
    if doc.name:
        print(f"   Name: {doc.name}")
    if doc.author is not None and doc.author.name:
        author = doc.author.name
        if doc.author.email is not None:
            author += f" <{doc.author.email}>"
        print(f"   Author: {author}")

    print(f"\n   📌 Waypoints: {len(doc.waypoints)}")
    print(f"   🛣️  Routes: {len(doc.routes)} ({sum(len(r) for r in doc.routes)} points)")
    print(f"   📍 Tracks: {len(doc.tracks)} ({sum(len(t) for t in doc.tracks)} points)")

    for i, rte in enumerate(doc.routes):
        print(f"       [{i + 1}] Route: {rte.name or '(unnamed)'}, {len(rte)} points")
    for i, trk in enumerate(doc.tracks):
        print(f"       [{i + 1}] Track: {trk.name or '(unnamed)'}, "
              f"{len(trk.segments)} segments, {len(trk)} points")

    bounds = doc.bounds()
    if bounds:
        print(f"\n   Bounds: ({bounds['minlat']:.6f}, {bounds['minlon']:.6f}) → "
              f"({bounds['maxlat']:.6f}, {bounds['maxlon']:.6f})")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="geogpx",
        description=f"{SOFT_FULL_NAME} — GPX reader/writer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --info route.gpx                   Show file information
  %(prog)s in.gpx out.gpx --gpx-version 1.1   Rewrite as GPX 1.1
  %(prog)s in.gpx a.gpx b.gpx                 Write several copies
        """)

    parser.add_argument("input", help="Input GPX file")
    parser.add_argument("outputs", nargs="*", help="Output GPX file(s)")
    parser.add_argument("--info", action="store_true", help="Show file info")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--name", type=str, help="Set document name")

    out_group = parser.add_argument_group("Output options")
    out_group.add_argument("--gpx-version", choices=["1.0", "1.1"],
                           help="GPX schema version to write (default: same as input)")
    out_group.add_argument("--legacy-entities", action="store_true",
                           help="Encode control and non-ASCII characters as entities")
    out_group.add_argument("--legacy-time", action="store_true",
                           help="Write timestamps with seven fractional digits")
    out_group.add_argument("--datetime", action="store_true",
                           help="Read timestamps as date-times instead of epoch seconds "
                                "(offsets are kept; fractions only with --legacy-time)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        doc = read_file(args.input, use_datetime=args.datetime)
    except (OSError, GpxError) as e:
        print(f"❌ Error reading {args.input}: {e}", file=sys.stderr)
        return 1

    if args.verbose or args.info:
        show_info(doc, args.input)

    if not args.outputs:
        if not args.info:
            total = sum(1 for _ in doc.iterate_points())
            print(f"✅ Read {total} points from {args.input}")
            print("   (specify output file(s) to convert, or use --info for details)")
        return 0

    if args.name:
        doc.name = args.name

    opts = {
        "version": args.gpx_version,
        "unsafe_chars": LEGACY_UNSAFE_CHARS if args.legacy_entities else None,
        "legacy_time": True if args.legacy_time else None,
    }

    for output_path in args.outputs:
        try:
            write_file(output_path, doc, **opts)
        except OSError as e:
            print(f"❌ Error writing {output_path}: {e}", file=sys.stderr)
            return 1
        version = effective_version(args.gpx_version or doc.version)
        print(f"✅ Converted → {output_path} (GPX {version})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
