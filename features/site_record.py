"""
BeachWatch — Site Records

Joins site metadata rows with the sample rows taken at that site, and lays
out a site's samples as table rows for the detail popup.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config.constants import (
    DESCRIPTION_FIELD,
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    SITE_FIELD,
)

logger = logging.getLogger(__name__)


@dataclass
class SiteRecord:
    """One sampling site and the samples taken there, in sheet order."""

    site_name: Any
    latitude: Optional[float]
    longitude: Optional[float]
    description: Optional[str]
    data: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class MeasurementSet:
    """Measurement columns to display, with their labels, in display order."""

    names: List[str]
    labels: List[str]


def build_record(site_meta: Dict[str, Any], sample_rows: Sequence[Dict[str, Any]]) -> SiteRecord:
    """Build the SiteRecord for one ``sitios`` row.

    Keeps every sample row whose site matches, in its original order. The
    input rows are not modified.
    """
    site_name = site_meta.get(SITE_FIELD)
    data = [row for row in sample_rows if row.get(SITE_FIELD) == site_name]
    return SiteRecord(
        site_name=site_name,
        latitude=to_float(site_meta.get(LATITUDE_FIELD)),
        longitude=to_float(site_meta.get(LONGITUDE_FIELD)),
        description=site_meta.get(DESCRIPTION_FIELD),
        data=data,
    )


def ordered_data(record: SiteRecord, measurement_names: Sequence[str]) -> List[List[Any]]:
    """One list per sample, holding the named fields in the given order.

    A field absent from a sample is None.
    """
    return [[row.get(name) for name in measurement_names] for row in record.data]


def build_measurements(label_sheet) -> MeasurementSet:
    """Read measurement names and labels from the ``etiquetas`` sheet.

    The sheet's column names are the measurement field names; its first row
    holds the label for each. A missing label falls back to the field name.
    """
    names = list(label_sheet.columns)
    first = label_sheet.rows[0] if label_sheet.rows else {}
    labels = []
    for name in names:
        label = first.get(name)
        labels.append(str(label) if label is not None else name)
    return MeasurementSet(names=names, labels=labels)


def to_float(value: Any) -> Optional[float]:
    """Coordinate cell → float, or None when blank or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable coordinate %r", value)
        return None
    if not math.isfinite(f):
        return None
    return f
