"""
Tests for drawing sites on the map.
"""

import folium
import pytest

from conftest import (
    NOW_MS,
    make_data_sheets,
    make_label_sheets,
    sample,
)
from config.constants import INITIAL_ZOOM, MARKER_SHAPE
from visualization.site_map import FoliumMapSink, draw_map, is_new_click

SITE_S = {"sitio": "S", "latitud": 10, "longitud": 20, "descripción": "Test beach"}


def test_single_fresh_good_sample(sink, controller):
    data = make_data_sheets([SITE_S], [sample("S", 1, 50)])
    placed = draw_map(data, make_label_sheets(), sink, controller, NOW_MS)

    assert len(placed) == 1
    assert placed[0].status == "good"
    assert len(sink.markers) == 1
    marker = sink.markers[0]
    assert marker["location"] == (10.0, 20.0)
    assert marker["icon"] == "images/good.svg"
    assert marker["shape"] == MARKER_SHAPE
    assert marker["title"] == "S"


def test_single_stale_sample_is_unknown(sink, controller):
    data = make_data_sheets([SITE_S], [sample("S", 20, 50)])
    placed = draw_map(data, make_label_sheets(), sink, controller, NOW_MS)
    assert placed[0].status == "unknown"
    assert sink.markers[0]["icon"] == "images/unknown.svg"


def test_map_created_at_center_and_zoom(sink, controller):
    sites = [SITE_S, {"sitio": "T", "latitud": 20, "longitud": 30}]
    draw_map(make_data_sheets(sites, []), make_label_sheets(), sink, controller, NOW_MS)
    assert sink.center == (15.0, 25.0)
    assert sink.zoom == INITIAL_ZOOM == 11


def test_sites_without_location_are_skipped(sink, controller, caplog):
    sites = [
        {"sitio": "Nowhere", "latitud": None, "longitud": -111.3},
        SITE_S,
        {"sitio": "Garbled", "latitud": "n/a", "longitud": "n/a"},
    ]
    with caplog.at_level("WARNING"):
        placed = draw_map(make_data_sheets(sites, []), make_label_sheets(), sink, controller, NOW_MS)

    assert [p.record.site_name for p in placed] == ["S"]
    assert len(sink.markers) == 1
    assert "Nowhere location unknown" in caplog.text


def test_sites_placed_in_sheet_order(sink, controller):
    sites = [
        {"sitio": "B", "latitud": 1, "longitud": 1},
        {"sitio": "A", "latitud": 2, "longitud": 2},
        {"sitio": "C", "latitud": 3, "longitud": 3},
    ]
    samples = [sample("A", 1, 150), sample("B", 1, 500), sample("C", 30, 10)]
    placed = draw_map(make_data_sheets(sites, samples), make_label_sheets(), sink, controller, NOW_MS)
    assert [(p.record.site_name, p.status) for p in placed] == [
        ("B", "unhealthy"),
        ("A", "caution"),
        ("C", "unknown"),
    ]


def test_popup_built_only_on_click(sink, controller):
    data = make_data_sheets([SITE_S], [sample("S", 1, 50)])
    draw_map(data, make_label_sheets(), sink, controller, NOW_MS)
    assert controller.open_popup is None

    popup = sink.click(0)
    assert popup.is_open
    assert popup.site_name == "S"
    assert "Test beach" in popup.tabs["Description"]
    assert "Enterococos" in popup.tabs["Data"]


def test_clicking_another_marker_closes_previous_popup(sink, controller):
    sites = [SITE_S, {"sitio": "T", "latitud": 20, "longitud": 30}]
    draw_map(make_data_sheets(sites, []), make_label_sheets(), sink, controller, NOW_MS)

    first = sink.click(0)
    second = sink.click(1)
    assert not first.is_open
    assert second.is_open
    assert controller.open_popup is second


def test_no_sites_centres_on_fallback(sink, controller):
    placed = draw_map(make_data_sheets([], []), make_label_sheets(), sink, controller, NOW_MS)
    assert placed == []
    assert sink.center == (26.0, -111.3)


def test_infinite_coordinates_are_not_drawn(sink, controller):
    sites = [SITE_S, {"sitio": "I", "latitud": "inf", "longitud": -111.0}]
    placed = draw_map(make_data_sheets(sites, []), make_label_sheets(), sink, controller, NOW_MS)
    assert [p.record.site_name for p in placed] == ["S"]
    assert [m["location"] for m in sink.markers] == [(10.0, 20.0)]


class TestFoliumMapSink:
    def test_builds_folium_map(self, controller):
        sink = FoliumMapSink()
        data = make_data_sheets([SITE_S], [sample("S", 1, 50)])
        draw_map(data, make_label_sheets(), sink, controller, NOW_MS)

        assert isinstance(sink.map, folium.Map)
        markers = [c for c in sink.map._children.values() if isinstance(c, folium.Marker)]
        assert len(markers) == 1
        assert markers[0].location == [10.0, 20.0]

        html = sink.map.get_root().render()
        assert "data:image/svg+xml;base64," in html
        assert "Water quality" in html

    def test_dispatch_click_opens_popup(self, controller):
        sink = FoliumMapSink()
        sites = [SITE_S, {"sitio": "T", "latitud": 20.123456, "longitud": 30}]
        draw_map(make_data_sheets(sites, []), make_label_sheets(), sink, controller, NOW_MS)

        popup = sink.dispatch_click(20.123456, 30.0)
        assert popup.site_name == "T"
        assert controller.open_popup is popup

        assert sink.dispatch_click(10, 20).site_name == "S"
        assert not popup.is_open

    def test_dispatch_click_elsewhere_does_nothing(self, controller):
        sink = FoliumMapSink()
        draw_map(make_data_sheets([SITE_S], []), make_label_sheets(), sink, controller, NOW_MS)
        assert sink.dispatch_click(-5, -5) is None
        assert controller.open_popup is None

    def test_place_marker_requires_map(self):
        with pytest.raises(RuntimeError):
            FoliumMapSink().place_marker((1, 2), "images/good.svg", MARKER_SHAPE, "X")

    def test_external_icon_url_passes_through(self):
        sink = FoliumMapSink()
        sink.create_map((0, 0), 3)
        sink.place_marker((1, 2), "https://example.org/flag.png", MARKER_SHAPE, "X")
        assert "https://example.org/flag.png" in sink.map.get_root().render()


class TestIsNewClick:
    CLICK = {"lat": 10, "lng": 20}

    def test_first_click_is_new(self):
        assert is_new_click(self.CLICK, None)

    def test_repeated_click_is_not_new(self):
        assert not is_new_click(dict(self.CLICK), self.CLICK)

    def test_other_flag_is_new(self):
        assert is_new_click({"lat": 11, "lng": 20}, self.CLICK)

    @pytest.mark.parametrize("clicked", [None, {}])
    def test_no_click(self, clicked):
        assert not is_new_click(clicked, self.CLICK)

    def test_reclick_after_close_reopens_popup(self, controller):
        sink = FoliumMapSink()
        draw_map(make_data_sheets([SITE_S], []), make_label_sheets(), sink, controller, NOW_MS)

        last_click = None
        for _ in range(2):
            assert is_new_click(self.CLICK, last_click)
            last_click = self.CLICK
            sink.dispatch_click(self.CLICK["lat"], self.CLICK["lng"])
            assert controller.open_popup.site_name == "S"
            assert not is_new_click(self.CLICK, last_click)

            controller.close()
            last_click = None
            assert controller.open_popup is None
