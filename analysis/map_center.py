"""
BeachWatch — Map Centre

Average position of all sampling sites with a usable location. A site at
exactly 0° latitude or 0° longitude is treated as "location not filled
in" rather than a real point, since blank coordinates are often exported
as zeros.
"""

import logging
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from config.constants import FALLBACK_CENTER, LATITUDE_FIELD, LONGITUDE_FIELD
from features.site_record import to_float

logger = logging.getLogger(__name__)


def compute_center(sites: Sequence[Dict[str, Any]]) -> Tuple[float, float]:
    """
    Centre the map on the mean latitude / longitude of the sites.

    Parameters
    ----------
    sites : sequence of dict
        ``sitios`` rows.

    Returns
    -------
    (lat, lon)
        ``FALLBACK_CENTER`` when no site has a valid, non-zero location.
    """
    if not sites:
        return FALLBACK_CENTER

    coords = np.array(
        [(to_float(s.get(LATITUDE_FIELD)), to_float(s.get(LONGITUDE_FIELD))) for s in sites],
        dtype=float,
    )
    lats, lons = coords[:, 0], coords[:, 1]
    valid = np.isfinite(lats) & np.isfinite(lons) & (lats != 0) & (lons != 0)

    count = int(valid.sum())
    if count == 0:
        logger.debug("No site has a usable location, centring on %s", FALLBACK_CENTER)
        return FALLBACK_CENTER

    center = (float(lats[valid].sum() / count), float(lons[valid].sum() / count))
    logger.debug("Map centre %s from %d of %d sites", center, count, len(sites))
    return center
