"""Tests for scores and synthetic point placement."""

import math

import pytest

from py_wilayah.core.geometry import point_in_polygon
from py_wilayah.core.sampler import (
    FALLBACK_JITTER_DEGREES,
    SyntheticPoint,
    dummy_score,
    generate_points_inside,
    score_band,
    score_key,
)

SQUARE = {"type": "Polygon", "coordinates": [[[106.0, -6.5], [107.0, -6.5], [107.0, -6.0], [106.0, -6.0]]]}

# Thin diagonal sliver: almost all of its bounding box lies outside it
SLIVER = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [1.0, 1.0], [1.0, 1.0 + 1e-9], [0.0, 1e-9]]],
}


class TestDummyScore:
    def test_constant_and_in_range(self):
        first = dummy_score("kab:bogor")
        assert first == dummy_score("kab:bogor")
        assert 20 <= first <= 95

    @pytest.mark.parametrize("key", ["", "prov:aceh", "kec:kebayoran baru", "x" * 500])
    def test_range_for_many_keys(self, key):
        assert 20 <= dummy_score(key) <= 95

    def test_score_key_uses_normalized_name(self):
        assert score_key(2, "Kabupaten Bogor") == "kab:bogor"
        assert score_key(1, "DKI JAKARTA") == "prov:dki jakarta"
        assert score_key(3, "Cilandak") == "kec:cilandak"

    def test_score_band_threshold(self):
        assert score_band(60) == "high"
        assert score_band(59) == "low"


class TestGeneratePointsInside:
    def test_deterministic(self):
        first = generate_points_inside(SQUARE, "seed-A")
        second = generate_points_inside(SQUARE, "seed-A")
        assert first == second
        assert [p.id for p in first] == [p.id for p in second]

    def test_seed_changes_points(self):
        assert generate_points_inside(SQUARE, "seed-A") != generate_points_inside(SQUARE, "seed-B")

    def test_count_within_range_and_inside(self):
        points = generate_points_inside(SQUARE, "jakarta")
        assert 5 <= len(points) <= 10
        for point in points:
            assert isinstance(point, SyntheticPoint)
            assert point_in_polygon(point.lon, point.lat, SQUARE)

    def test_custom_count_range(self):
        points = generate_points_inside(SQUARE, "fixed", desired_count_range=(3, 3))
        assert len(points) == 3
        assert [p.name for p in points] == ["Sekolah 1", "Sekolah 2", "Sekolah 3"]

    def test_no_bounding_box_returns_empty(self):
        assert generate_points_inside(None, "seed") == []
        assert generate_points_inside({"type": "Point", "coordinates": [1, 2]}, "seed") == []

    def test_fallback_jitters_around_centroid(self):
        points = generate_points_inside(SLIVER, "thin", max_attempts=1)
        assert len(points) >= 3
        for point in points:
            # Near the centroid (0.5, 0.5) of the sliver
            assert math.hypot(point.lon - 0.5, point.lat - 0.5) < FALLBACK_JITTER_DEGREES + 1e-6

    def test_fallback_is_deterministic(self):
        first = generate_points_inside(SLIVER, "thin", max_attempts=1)
        second = generate_points_inside(SLIVER, "thin", max_attempts=1)
        assert first == second

    def test_degenerate_ring_uses_fallback(self):
        # Two-vertex ring has a box but never contains anything
        segment = {"type": "Polygon", "coordinates": [[[0.0, 0.0], [2.0, 2.0]]]}
        points = generate_points_inside(segment, "segment", desired_count_range=(4, 4))
        assert len(points) == 4
        for point in points:
            assert math.hypot(point.lon - 1.0, point.lat - 1.0) < FALLBACK_JITTER_DEGREES + 1e-6

    def test_point_feature(self):
        point = SyntheticPoint(id="s#1", name="Sekolah 1", lat=-6.2, lon=106.8)
        assert point.to_feature() == {
            "type": "Feature",
            "properties": {"id": "s#1", "name": "Sekolah 1"},
            "geometry": {"type": "Point", "coordinates": [106.8, -6.2]},
        }
