"""
geogpx — File helpers
Read, write and convert GPX files on disk.
"""

from __future__ import annotations
import inspect
import logging
from pathlib import Path
from typing import Callable, Union

from .models import Document
from .parser import parse
from .serializer import SerializeOptions, serialize

logger = logging.getLogger(__name__)

SOFT_NAME = "geogpx"
SOFT_VERSION = "1.0"
SOFT_FULL_NAME = f"{SOFT_NAME} v{SOFT_VERSION}"

PathLike = Union[str, Path]


def _filter_kwargs(func: Callable, opts: dict) -> dict:
    """Filter kwargs to only include parameters accepted by the function."""
    valid = set(inspect.signature(func).parameters)
    return {k: v for k, v in opts.items() if k in valid}


def read_file(filepath: PathLike, **opts) -> Document:
    """Read a GPX file. Accepts the keyword options of ``parse``."""
    data = Path(filepath).read_bytes()
    doc = parse(data, **_filter_kwargs(parse, opts))
    logger.info("Read %s (GPX %s, %d waypoints, %d routes, %d tracks)", filepath,
                doc.version, len(doc.waypoints), len(doc.routes), len(doc.tracks))
    return doc


def write_file(filepath: PathLike, document: Document, **opts):
    """Write a GPX file. Accepts the fields of ``SerializeOptions``."""
    options = SerializeOptions(**_filter_kwargs(SerializeOptions, opts))
    Path(filepath).write_text(serialize(document, options), encoding="utf-8")
    logger.info("Wrote %s", filepath)


def convert(input_path: PathLike, output_path: PathLike, **opts) -> Document:
    """Read a GPX file and write it back, e.g. as another schema version."""
    doc = read_file(input_path, **opts)
    write_file(output_path, doc, **opts)
    return doc
