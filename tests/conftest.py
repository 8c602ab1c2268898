"""
Shared fixtures for BeachWatch tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from data_fetch.sheets_client import Sheet
from visualization.popups import PopupController

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)
DAY_MS = 24 * 3600 * 1000


def days_ago(days: float) -> str:
    """ISO timestamp ``days`` before NOW."""
    return (NOW - timedelta(days=days)).isoformat()


def sample(site, days, count, **fields):
    row = {"sitio": site, "fecha": days_ago(days), "enterococos": count}
    row.update(fields)
    return row


def make_data_sheets(sites, samples):
    return {
        "datos": Sheet("datos", ["sitio", "fecha", "enterococos"], list(samples)),
        "sitios": Sheet("sitios", ["sitio", "latitud", "longitud", "descripción"], list(sites)),
    }


def make_label_sheets(labels=None):
    labels = labels or {"fecha": "Fecha", "enterococos": "Enterococos"}
    return {"etiquetas": Sheet("etiquetas", list(labels), [dict(labels)])}


class RecordingSink:
    """Map sink that records requests instead of drawing."""

    def __init__(self):
        self.center = None
        self.zoom = None
        self.markers = []
        self.handlers = {}

    def create_map(self, center, zoom):
        self.center = center
        self.zoom = zoom
        return "map"

    def place_marker(self, location, icon_url, shape, title):
        marker = {"location": location, "icon": icon_url, "shape": shape, "title": title}
        self.markers.append(marker)
        return len(self.markers) - 1

    def on_click(self, marker, callback):
        self.handlers[marker] = callback

    def click(self, marker):
        return self.handlers[marker]()


@pytest.fixture
def now_ms():
    return NOW_MS


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controller():
    return PopupController()
