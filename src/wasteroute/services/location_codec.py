"""Decode stored household locations into latitude/longitude pairs.

Locations reach us in whichever shape the database driver produced:

* WKT text, ``"POINT(lng lat)"``, optionally with a PostGIS ``SRID=<n>;``
  prefix
* PostGIS (E)WKB hex, in either byte order
* a mapping (or object) exposing ``coordinates: [lng, lat]`` or ``x``/``y``

Decoders are tried in order and the first one that succeeds wins. Anything
unrecognised decodes to ``None``; nothing here raises.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Optional

import shapely.wkb
import shapely.wkt
from shapely.errors import ShapelyError
from shapely.geometry import Point

_SRID_PREFIX = re.compile(r"^\s*SRID=\d+\s*;", re.IGNORECASE)
_HEX_TEXT = re.compile(r"^(?:[0-9A-Fa-f]{2})+$")


@dataclass(frozen=True, slots=True)
class LatLng:
    lat: float
    lng: float

    @property
    def is_origin(self) -> bool:
        return self.lat == 0 and self.lng == 0


LocationDecoder = Callable[[Any], Optional[LatLng]]


def _coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _pair(lng: Any, lat: Any) -> Optional[LatLng]:
    lng_value, lat_value = _coordinate(lng), _coordinate(lat)
    if lng_value is None or lat_value is None:
        return None
    return LatLng(lat=lat_value, lng=lng_value)


def _point(geometry: Any) -> Optional[LatLng]:
    if not isinstance(geometry, Point) or geometry.is_empty:
        return None
    return _pair(geometry.x, geometry.y)


def decode_wkt_point(value: Any) -> Optional[LatLng]:
    """Decode ``POINT(lng lat)`` or ``SRID=4326;POINT(lng lat)`` text."""

    if not isinstance(value, str):
        return None
    text = _SRID_PREFIX.sub("", value).strip()
    if not text.upper().startswith("POINT"):
        return None
    try:
        geometry = shapely.wkt.loads(text)
    except (ShapelyError, ValueError):
        return None
    return _point(geometry)


def decode_ewkb_hex_point(value: Any) -> Optional[LatLng]:
    """Decode the hex (E)WKB point PostGIS returns by default."""

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _HEX_TEXT.match(text):
        return None
    try:
        geometry = shapely.wkb.loads(text, hex=True)
    except (ShapelyError, ValueError, TypeError):
        return None
    return _point(geometry)


def decode_structured_point(value: Any) -> Optional[LatLng]:
    """Decode GeoJSON-like ``coordinates`` or ``x``/``y`` fields."""

    if value is None or isinstance(value, (str, bytes)):
        return None
    if isinstance(value, Mapping):
        coordinates = value.get("coordinates")
        x, y = value.get("x"), value.get("y")
    else:
        coordinates = getattr(value, "coordinates", None)
        x, y = getattr(value, "x", None), getattr(value, "y", None)

    if isinstance(coordinates, Sequence) and not isinstance(coordinates, str):
        if len(coordinates) < 2:
            return None
        return _pair(coordinates[0], coordinates[1])
    if x is not None and y is not None:
        return _pair(x, y)
    return None


DECODERS: tuple[LocationDecoder, ...] = (
    decode_wkt_point,
    decode_ewkb_hex_point,
    decode_structured_point,
)


def decode_location(value: Any) -> Optional[LatLng]:
    """Return the first successful decoding of ``value`` or ``None``."""

    if value is None:
        return None
    for decoder in DECODERS:
        try:
            decoded = decoder(value)
        except (TypeError, ValueError, struct.error):
            decoded = None
        if decoded is not None:
            return decoded
    return None
