"""Tests for static map rendering."""

import pytest

from py_wilayah.core.explorer import RegionExplorer
from py_wilayah.core.geometry import INDONESIA_BOUNDS
from py_wilayah.core.navigation import NavState
from py_wilayah.visualize import HIGH_SCORE_COLOR, LOW_SCORE_COLOR, StaticMapRenderer, score_color


def test_score_color_threshold():
    assert score_color(60) == HIGH_SCORE_COLOR
    assert score_color(59) == LOW_SCORE_COLOR
    assert score_color(None) == LOW_SCORE_COLOR


class TestStaticMapRenderer:
    @pytest.fixture
    def renderer(self, static_fetcher, boundary_urls):
        renderer = StaticMapRenderer()
        explorer = RegionExplorer(renderer, renderer, static_fetcher, boundary_urls)
        renderer.on_event = explorer.handle
        renderer.explorer = explorer
        return renderer

    def test_moves_settle_immediately(self, renderer):
        renderer.explorer.start()
        assert renderer.moves == [INDONESIA_BOUNDS]
        assert renderer.layer is not None
        assert len(renderer.layer) == 3

    def test_drill_down_and_save(self, renderer, tmp_path):
        explorer = renderer.explorer
        explorer.start()
        for name in ("DKI JAKARTA", "Kota Jakarta Selatan", "Cilandak"):
            assert explorer.click_name(name)
        assert explorer.state == NavState.DISTRICT_SELECTED
        assert renderer.points

        output = renderer.save(tmp_path / "cilandak.png")
        assert output.exists()
        assert output.stat().st_size > 0

    def test_save_empty_view(self, tmp_path):
        output = StaticMapRenderer().save(tmp_path / "empty.png", title="Empty")
        assert output.exists()
