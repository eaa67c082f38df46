"""
Deterministic placeholder data for the focused region.

This module implements:
- Per-region dummy scores derived from a string hash
- Synthetic point placement by rejection sampling inside a boundary
- A centroid-jitter fallback for regions too thin or small to sample

Nothing here is real data. Every output is a pure function of its inputs.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import structlog

from .geometry import bounding_box, centroid, normalize_name, point_in_polygon
from .xorshift_prng import XorShiftPRNG, hash32

logger = structlog.get_logger()

SCORE_MIN = 20
SCORE_SPAN = 76  # scores land in [20, 95]
SCORE_THRESHOLD = 60

DEFAULT_COUNT_RANGE = (5, 10)
MAX_ATTEMPTS_PER_POINT = 200
FALLBACK_MIN_POINTS = 3
FALLBACK_JITTER_DEGREES = 0.01

LEVEL_KEY_PREFIXES = {1: "prov", 2: "kab", 3: "kec"}


@dataclass(frozen=True)
class SyntheticPoint:
    """Placeholder marker inside a district."""

    id: str
    name: str
    lat: float
    lon: float

    def to_feature(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {"id": self.id, "name": self.name},
            "geometry": {"type": "Point", "coordinates": [self.lon, self.lat]},
        }


def dummy_score(key: str) -> int:
    """Stable score in [20, 95] for a key such as ``"kab:bogor"``."""
    score = hash32(key) % SCORE_SPAN + SCORE_MIN
    return max(0, min(100, score))


def score_key(level: int, name: str) -> str:
    """Score key for a region, e.g. ``score_key(2, "Kabupaten Bogor") == "kab:bogor"``."""
    return f"{LEVEL_KEY_PREFIXES[int(level)]}:{normalize_name(name)}"


def score_band(score: int) -> str:
    return "high" if score >= SCORE_THRESHOLD else "low"


def generate_points_inside(
    geometry,
    seed: str,
    desired_count_range: Tuple[int, int] = DEFAULT_COUNT_RANGE,
    max_attempts: int = MAX_ATTEMPTS_PER_POINT,
    name_prefix: str = "Sekolah",
) -> List[SyntheticPoint]:
    """
    Place synthetic points inside a Polygon or MultiPolygon.

    Args:
        geometry: Geometry, GeoJSON geometry mapping, or None
        seed: Seed string; the same (geometry, seed) yields the same list
        desired_count_range: Inclusive (low, high) bounds on the point count
        max_attempts: Rejection samples tried per point before giving up
        name_prefix: Display name prefix of each point

    Returns:
        Ordered list of SyntheticPoint. Empty when no bounding box can be
        computed. When rejection sampling places nothing, at least
        max(3, count) points jittered around the centroid are returned;
        those are not guaranteed to lie inside the boundary.
    """
    prng = XorShiftPRNG(seed)
    low, high = desired_count_range
    count = prng.randint(low, high)

    box = bounding_box(geometry)
    if box is None:
        logger.debug("No bounding box for point generation", seed=seed)
        return []

    points: List[SyntheticPoint] = []
    for _ in range(count):
        for _attempt in range(max_attempts):
            lon = prng.uniform(box.min_lon, box.max_lon)
            lat = prng.uniform(box.min_lat, box.max_lat)
            if point_in_polygon(lon, lat, geometry):
                points.append(_make_point(seed, len(points), lat, lon, name_prefix))
                break

    if points:
        return points

    center = centroid(geometry) or box.center
    fallback_count = max(FALLBACK_MIN_POINTS, count)
    logger.info(
        "Rejection sampling placed no points, using centroid jitter",
        seed=seed,
        count=fallback_count,
    )
    for index in range(fallback_count):
        radius = prng.uniform(0.0, FALLBACK_JITTER_DEGREES)
        angle = prng.random() * 2.0 * math.pi
        lon = center[0] + radius * math.cos(angle)
        lat = center[1] + radius * math.sin(angle)
        points.append(_make_point(seed, index, lat, lon, name_prefix))
    return points


def _make_point(seed: str, index: int, lat: float, lon: float, name_prefix: str) -> SyntheticPoint:
    return SyntheticPoint(
        id=f"{seed}#{index + 1}",
        name=f"{name_prefix} {index + 1}",
        lat=lat,
        lon=lon,
    )
