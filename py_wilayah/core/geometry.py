"""
Geometry utilities for administrative boundary data.

This module handles:
- Bounding boxes over arbitrarily nested GeoJSON coordinates
- Point-in-polygon membership (crossing-number test, holes respected)
- Region name canonicalization for cross-dataset joins
- Dissolving fragmented features into one MultiPolygon per key
- Area-weighted centroids

Coordinates are always (longitude, latitude). Geometry types other than
Polygon and MultiPolygon contribute nothing and never raise.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np
import structlog

logger = structlog.get_logger()

POLYGON = "Polygon"
MULTI_POLYGON = "MultiPolygon"

# Longest prefix first so "kota administrasi" wins over "kota"
_ADMIN_PREFIX = re.compile(r"^(kota administrasi|kabupaten|kota|kab\.?)\s+")

Ring = List[List[float]]
RingSet = List[Ring]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned (lon, lat) rectangle in degrees."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def width(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def height(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def center(self) -> Tuple[float, float]:
        """(lon, lat) of the box center."""
        return (
            (self.min_lon + self.max_lon) / 2.0,
            (self.min_lat + self.max_lat) / 2.0,
        )

    def padded(self, fraction: float) -> "BoundingBox":
        """Grow the box on every side by ``fraction`` of its width/height."""
        dx = self.width * fraction
        dy = self.height * fraction
        return BoundingBox(
            self.min_lon - dx, self.min_lat - dy, self.max_lon + dx, self.max_lat + dy
        )

    def is_close(self, other: Optional["BoundingBox"], tolerance: float = 1e-9) -> bool:
        if other is None:
            return False
        return all(
            abs(a - b) <= tolerance
            for a, b in zip(self.as_tuple(), other.as_tuple())
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def to_leaflet_bounds(self) -> List[List[float]]:
        """Bounds as ``[[south, west], [north, east]]`` for a map widget."""
        return [[self.min_lat, self.min_lon], [self.max_lat, self.max_lon]]


INDONESIA_BOUNDS = BoundingBox(95.0, -11.0, 141.0, 6.0)


@dataclass(frozen=True)
class Geometry:
    """
    Tagged geometry value.

    ``type`` is the GeoJSON tag; only ``Polygon`` and ``MultiPolygon`` carry
    meaning for the utilities below, anything else is treated as empty.
    """

    type: str
    coordinates: Any = field(default=None, hash=False)

    @classmethod
    def from_geojson(cls, data: Optional[Dict[str, Any]]) -> "Geometry":
        if not isinstance(data, dict):
            return cls(type="None", coordinates=None)
        return cls(type=str(data.get("type", "None")), coordinates=data.get("coordinates"))

    @property
    def is_supported(self) -> bool:
        return self.type in (POLYGON, MULTI_POLYGON)

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": self.type, "coordinates": self.coordinates}


def as_geometry(geometry) -> Geometry:
    """Accept a Geometry, a GeoJSON geometry mapping, or None."""
    if isinstance(geometry, Geometry):
        return geometry
    return Geometry.from_geojson(geometry)


def polygon_parts(geometry) -> List[RingSet]:
    """
    Return the ring-sets making up a geometry.

    A Polygon is one ring-set, a MultiPolygon is several, and every other
    type is none.
    """
    geom = as_geometry(geometry)
    if not isinstance(geom.coordinates, list):
        return []
    if geom.type == POLYGON:
        return [geom.coordinates]
    if geom.type == MULTI_POLYGON:
        return [part for part in geom.coordinates if isinstance(part, list)]
    return []


def _is_coordinate_pair(value) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return False
    lon, lat = value[0], value[1]
    if isinstance(lon, bool) or isinstance(lat, bool):
        return False
    if not isinstance(lon, (int, float)) or not isinstance(lat, (int, float)):
        return False
    return math.isfinite(lon) and math.isfinite(lat)


def _iter_pairs(coords) -> Iterable[Tuple[float, float]]:
    # Iterative descent; nesting depth differs between Polygon and MultiPolygon
    stack = [coords]
    while stack:
        node = stack.pop()
        if _is_coordinate_pair(node):
            yield float(node[0]), float(node[1])
        elif isinstance(node, (list, tuple)):
            stack.extend(node)


def bounding_box(geometry) -> Optional[BoundingBox]:
    """
    Compute the bounding box of a Polygon or MultiPolygon.

    Args:
        geometry: Geometry, GeoJSON geometry mapping, or None

    Returns:
        BoundingBox, or None when no finite coordinate pair was found. None
        means "cannot compute", never an empty box at the origin.
    """
    geom = as_geometry(geometry)
    if not geom.is_supported:
        return None

    min_lon = min_lat = math.inf
    max_lon = max_lat = -math.inf
    found = False
    for lon, lat in _iter_pairs(geom.coordinates):
        found = True
        min_lon = min(min_lon, lon)
        min_lat = min(min_lat, lat)
        max_lon = max(max_lon, lon)
        max_lat = max(max_lat, lat)

    if not found:
        return None
    return BoundingBox(min_lon, min_lat, max_lon, max_lat)


def _ring_array(ring) -> Optional[np.ndarray]:
    if not isinstance(ring, list):
        return None
    pairs = [(p[0], p[1]) for p in ring if _is_coordinate_pair(p)]
    if len(pairs) < 3:
        return None
    return np.asarray(pairs, dtype=float)


def _ring_contains(ring, lon: float, lat: float) -> bool:
    """Crossing-number test of one linear ring."""
    pts = _ring_array(ring)
    if pts is None:
        return False

    xi, yi = pts[:, 0], pts[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > lat) != (yj > lat)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (lat - yi) / (yj - yi) + xi
        crossings = straddles & (lon < x_cross)
    return bool(np.count_nonzero(crossings) % 2)


def _rings_contain(rings: RingSet, lon: float, lat: float) -> bool:
    if not rings:
        return False
    if not _ring_contains(rings[0], lon, lat):
        return False
    return not any(_ring_contains(hole, lon, lat) for hole in rings[1:])


def point_in_polygon(lon: float, lat: float, geometry) -> bool:
    """
    Test whether (lon, lat) lies inside a Polygon or MultiPolygon.

    Ring 0 of each polygon is the exterior, later rings are holes. A
    MultiPolygon contains the point if any of its polygons does. Rings with
    fewer than 3 vertices never contain anything.
    """
    return any(_rings_contain(rings, lon, lat) for rings in polygon_parts(geometry))


def normalize_name(name: Optional[str]) -> str:
    """
    Canonicalize a region name for joining independently produced datasets.

    Lowercases, trims, and strips one administrative prefix ("kabupaten",
    "kota", "kota administrasi", "kab."). "Kabupaten Bogor" and "Kota Bogor"
    both become "bogor".
    """
    if name is None:
        return ""
    text = str(name).strip().lower()
    return _ADMIN_PREFIX.sub("", text).strip()


def dissolve_by_key(
    features: Iterable[Dict[str, Any]],
    key_of: Callable[[Dict[str, Any]], str],
    key_field: str = "name",
) -> List[Dict[str, Any]]:
    """
    Merge features sharing a key into one MultiPolygon feature per key.

    This is coordinate concatenation, not a topological union: every ring-set
    of every group member becomes one part of the merged MultiPolygon.
    Properties come from the first member of each group, with ``key_field``
    set to the group key. Groups keep first-seen order.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for feature in features:
        groups.setdefault(key_of(feature), []).append(feature)

    merged = []
    for key, members in groups.items():
        parts: List[RingSet] = []
        for member in members:
            parts.extend(polygon_parts(member.get("geometry")))

        properties = dict(members[0].get("properties") or {})
        properties[key_field] = key
        merged.append(
            {
                "type": "Feature",
                "properties": properties,
                "geometry": {"type": MULTI_POLYGON, "coordinates": parts},
            }
        )

    logger.debug("Dissolved features", groups=len(merged))
    return merged


def _signed_area_and_centroid(pts: np.ndarray) -> Tuple[float, float, float]:
    x, y = pts[:, 0], pts[:, 1]
    xn, yn = np.roll(x, -1), np.roll(y, -1)
    cross = x * yn - xn * y
    area = cross.sum() / 2.0
    if area == 0:
        return 0.0, 0.0, 0.0
    cx = ((x + xn) * cross).sum() / (6.0 * area)
    cy = ((y + yn) * cross).sum() / (6.0 * area)
    return float(area), float(cx), float(cy)


def centroid(geometry) -> Optional[Tuple[float, float]]:
    """
    Area-weighted centroid (lon, lat) of a Polygon or MultiPolygon.

    Holes are subtracted. Falls back to the mean of all vertices when the
    net area is zero, and returns None when there are no coordinates.
    """
    total_area = 0.0
    sum_x = 0.0
    sum_y = 0.0
    for rings in polygon_parts(geometry):
        for index, ring in enumerate(rings):
            pts = _ring_array(ring)
            if pts is None:
                continue
            area, cx, cy = _signed_area_and_centroid(pts)
            weight = abs(area) if index == 0 else -abs(area)
            total_area += weight
            sum_x += weight * cx
            sum_y += weight * cy

    if abs(total_area) > 1e-15:
        return sum_x / total_area, sum_y / total_area

    geom = as_geometry(geometry)
    pairs = list(_iter_pairs(geom.coordinates)) if geom.is_supported else []
    if not pairs:
        return None
    arr = np.asarray(pairs, dtype=float)
    return float(arr[:, 0].mean()), float(arr[:, 1].mean())
