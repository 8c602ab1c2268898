"""
BeachWatch — Folium Site Map

Draws one flag per sampling site, coloured by the site's current status:
  - Street map and Esri satellite base layers with layer control
  - Flag markers (unknown / good / caution / unhealthy)
  - Status legend
  - Click dispatch: Streamlit reports which marker was clicked and the
    marker's handler builds that site's detail popup on demand
"""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

import folium
from branca.element import Element

from analysis.map_center import compute_center
from config.constants import (
    DATA_SHEET,
    FLAG_ICONS,
    INITIAL_ZOOM,
    LABELS_SHEET,
    MARKER_ICON_ANCHOR,
    MARKER_ICON_SIZE,
    MARKER_SHAPE,
    MAX_SAMPLE_AGE_MS,
    SITES_SHEET,
    STATUS_LEVELS,
)
from features.site_record import MeasurementSet, SiteRecord, build_measurements, build_record
from models.health_model import classify_health
from visualization.popups import PopupController

logger = logging.getLogger(__name__)

ASSET_DIR = Path(__file__).resolve().parent


class MapSink(Protocol):
    """What the site map needs from a map widget."""

    def create_map(self, center: Tuple[float, float], zoom: int) -> Any: ...

    def place_marker(
        self, location: Tuple[float, float], icon_url: str, shape: Dict, title: Any
    ) -> Any: ...

    def on_click(self, marker: Any, callback: Callable[[], Any]) -> None: ...


@dataclass
class SiteMarker:
    record: SiteRecord
    status: str
    marker: Any


# -----------------------------------------------------------------------------
# Orchestration
# -----------------------------------------------------------------------------
def draw_map(
    data_sheets: Dict,
    label_sheets: Dict,
    sink: MapSink,
    controller: PopupController,
    now_ms: int,
    stale_ms: int = MAX_SAMPLE_AGE_MS,
    zoom: int = INITIAL_ZOOM,
) -> List[SiteMarker]:
    """
    Centre the map on the sites and place a status flag for each one.

    Parameters
    ----------
    data_sheets : dict
        ``{"datos": Sheet, "sitios": Sheet}`` from the data spreadsheet.
    label_sheets : dict
        ``{"etiquetas": Sheet}`` from the label spreadsheet.
    sink : MapSink
        Map widget receiving the map, markers and click handlers.
    controller : PopupController
        Holds the currently open popup; click handlers go through it.
    now_ms : int
        Reference time for staleness, fixed for the whole pass.

    Returns
    -------
    list of SiteMarker, one per site placed on the map, in sheet order.
    """
    sites = data_sheets[SITES_SHEET].rows
    samples = data_sheets[DATA_SHEET].rows

    center = compute_center(sites)
    sink.create_map(center, zoom)

    measurements = build_measurements(label_sheets[LABELS_SHEET])

    placed = []
    for site_meta in sites:
        record = build_record(site_meta, samples)
        site_marker = mark_site(sink, controller, record, measurements, now_ms, stale_ms)
        if site_marker is not None:
            placed.append(site_marker)

    logger.info("Placed %d of %d sites", len(placed), len(sites))
    return placed


def mark_site(
    sink: MapSink,
    controller: PopupController,
    record: SiteRecord,
    measurements: MeasurementSet,
    now_ms: int,
    stale_ms: int = MAX_SAMPLE_AGE_MS,
) -> Optional[SiteMarker]:
    """Flag one site on the map and wire its popup. Sites without a location are skipped."""
    status = classify_health(record.data, stale_ms, now_ms)

    if not record.has_location:
        logger.warning("%s location unknown, not drawn", record.site_name)
        return None

    marker = sink.place_marker(
        (record.latitude, record.longitude),
        FLAG_ICONS[status],
        MARKER_SHAPE,
        record.site_name,
    )

    def show_details():
        return controller.handle_click(record, measurements)

    sink.on_click(marker, show_details)
    return SiteMarker(record=record, status=status, marker=marker)


# -----------------------------------------------------------------------------
# Folium map sink
# -----------------------------------------------------------------------------
class FoliumMapSink:
    """MapSink drawing onto a folium map."""

    def __init__(self):
        self.map: Optional[folium.Map] = None
        self._handlers: Dict[Tuple[float, float], Callable[[], Any]] = {}

    def create_map(self, center: Tuple[float, float], zoom: int) -> folium.Map:
        m = folium.Map(
            location=[center[0], center[1]],
            zoom_start=zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles="OpenStreetMap",
            name="🗺 Street Map",
            overlay=False,
            control=True,
        ).add_to(m)
        folium.TileLayer(
            tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
            attr="Esri, Maxar, Earthstar Geographics",
            name="🛰 Satellite",
            overlay=False,
            control=True,
        ).add_to(m)
        folium.LayerControl(collapsed=True).add_to(m)
        m.get_root().html.add_child(Element(_legend_html()))

        self.map = m
        self._handlers = {}
        return m

    def place_marker(
        self, location: Tuple[float, float], icon_url: str, shape: Dict, title: Any
    ) -> folium.Marker:
        if self.map is None:
            raise RuntimeError("create_map() must be called before place_marker()")

        # Leaflet hit-tests the whole icon box, so the polygon in ``shape``
        # is not passed on.
        icon = folium.CustomIcon(
            _icon_image(icon_url),
            icon_size=MARKER_ICON_SIZE,
            icon_anchor=MARKER_ICON_ANCHOR,
        )
        marker = folium.Marker(
            location=[location[0], location[1]],
            icon=icon,
            tooltip=f"{title} — click for details",
        )
        marker.add_to(self.map)
        return marker

    def on_click(self, marker: folium.Marker, callback: Callable[[], Any]) -> None:
        self._handlers[_location_key(marker.location)] = callback

    def dispatch_click(self, lat: float, lon: float) -> Optional[Any]:
        """Run the handler of the marker at (lat, lon), if there is one."""
        handler = self._handlers.get(_location_key((lat, lon)))
        if handler is None:
            logger.debug("No marker at %.5f, %.5f", lat, lon)
            return None
        return handler()


def is_new_click(clicked: Optional[Dict], last_click: Optional[Dict]) -> bool:
    """True when st_folium reports a click that has not been handled yet."""
    if not clicked:
        return False
    return clicked != last_click


def _location_key(location: Sequence[float]) -> Tuple[float, float]:
    return round(float(location[0]), 5), round(float(location[1]), 5)


def _icon_image(icon_url: str) -> str:
    """Inline a bundled flag image as a data URL; other URLs pass through."""
    path = ASSET_DIR / icon_url
    if not path.is_file():
        return icon_url
    mime = "image/svg+xml" if path.suffix == ".svg" else f"image/{path.suffix.lstrip('.')}"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def _legend_html() -> str:
    rows = "".join(
        f'<div><span style="display:inline-block;width:10px;height:10px;'
        f'background:{level["color"]};margin-right:6px;border-radius:2px;"></span>'
        f'{level["label"]}</div>'
        for level in STATUS_LEVELS.values()
    )
    return (
        '<div style="position:fixed;bottom:24px;left:12px;z-index:9999;'
        'background:rgba(255,255,255,0.9);padding:8px 12px;border-radius:6px;'
        "font-family:'Segoe UI',sans-serif;font-size:12px;"
        'box-shadow:0 1px 3px rgba(0,0,0,0.3);">'
        f"<b>Water quality</b>{rows}</div>"
    )
