"""
BeachWatch — Site Detail Popups

Each marker opens a two-tab popup:
  - Description: site name, location, description, sample count
  - Data: every sample taken at the site, one column per measurement

Popups are built only when a marker is clicked, and only one is open at a
time: opening a popup closes whichever one was open before.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jinja2 import Environment, select_autoescape

from features.site_record import MeasurementSet, SiteRecord, ordered_data

logger = logging.getLogger(__name__)


DESCRIPTION_TEMPLATE = """
<div style="font-family:'Segoe UI',sans-serif;min-width:220px;line-height:1.6;">
  <div style="font-weight:700;font-size:15px;margin-bottom:4px;">{{ site_info.site_name }}</div>
  {% if site_info.description %}
  <div style="color:#475569;margin-bottom:6px;">{{ site_info.description }}</div>
  {% endif %}
  {% if site_info.has_location %}
  <b>Coordinates</b>: {{ "%.4f"|format(site_info.latitude) }}, {{ "%.4f"|format(site_info.longitude) }}<br>
  {% endif %}
  <b>Samples</b>: {{ data_rows|length }}
</div>
"""

DATA_TEMPLATE = """
<table style="font-family:'Segoe UI',sans-serif;font-size:12px;border-collapse:collapse;">
  <thead>
    <tr>
    {% for label in measurements.labels %}
      <th style="padding:3px 8px;border-bottom:2px solid #cbd5e1;text-align:left;">{{ label }}</th>
    {% endfor %}
    </tr>
  </thead>
  <tbody>
  {% for row in data_rows %}
    <tr>
    {% for value in row %}
      <td style="padding:2px 8px;border-bottom:1px solid #e2e8f0;">{{ value|cell }}</td>
    {% endfor %}
    </tr>
  {% else %}
    <tr><td colspan="{{ measurements.names|length }}" style="padding:4px 8px;color:#94a3b8;">No samples</td></tr>
  {% endfor %}
  </tbody>
</table>
"""


def build_site_binder(record: SiteRecord, measurements: MeasurementSet) -> Dict[str, Any]:
    """Bundle a site, the measurement definitions and its table rows for the templates."""
    return {
        "site_info": record,
        "measurements": measurements,
        "data_rows": ordered_data(record, measurements.names),
    }


def _format_cell(value: Any) -> str:
    if value is None:
        return "–"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class PopupTemplates:
    """The description and data templates, compiled once."""

    def __init__(self):
        env = Environment(autoescape=select_autoescape(default_for_string=True))
        env.filters["cell"] = _format_cell
        self.description = env.from_string(DESCRIPTION_TEMPLATE)
        self.data = env.from_string(DATA_TEMPLATE)

    def render_description(self, binder: Dict[str, Any]) -> str:
        return self.description.render(**binder)

    def render_data(self, binder: Dict[str, Any]) -> str:
        return self.data.render(**binder)


@dataclass
class Popup:
    site_name: Any
    tabs: Dict[str, str] = field(default_factory=dict)
    is_open: bool = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False


class PopupController:
    """Owns the one popup that may be open on the map."""

    def __init__(self, templates: Optional[PopupTemplates] = None):
        self.templates = templates or PopupTemplates()
        self.open_popup: Optional[Popup] = None

    def handle_click(self, record: SiteRecord, measurements: MeasurementSet) -> Popup:
        """Close the open popup, then build and open the one for ``record``."""
        self.close()

        binder = build_site_binder(record, measurements)
        popup = Popup(
            site_name=record.site_name,
            tabs={
                "Description": self.templates.render_description(binder),
                "Data": self.templates.render_data(binder),
            },
        )
        popup.open()
        self.open_popup = popup
        logger.debug("Opened popup for %s", record.site_name)
        return popup

    def close(self) -> None:
        if self.open_popup is not None:
            self.open_popup.close()
            self.open_popup = None
