"""
BeachWatch — Site Health Classification

A site's status comes from its most recent sample only:

  - no dated sample, or the newest one older than the staleness window → unknown
  - enterococci count missing or not a number on the newest sample    → unknown
  - count ≤ good cutoff                                               → good
  - count ≤ caution cutoff                                            → caution
  - otherwise                                                         → unhealthy
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

import pandas as pd

from config.constants import (
    BACTERIA_CUTOFFS,
    BACTERIA_FIELD,
    DATE_FIELD,
    FLAG_ICONS,
    MAX_SAMPLE_AGE_MS,
    STATUS_LEVELS,
)

MS_PER_DAY = 24 * 3600 * 1000


def current_time_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def parse_timestamp(value: Any) -> Optional[int]:
    """
    Parse a sample date to epoch milliseconds.

    Strings without a UTC offset are read as UTC. Anything that is not a
    date string or date object, or does not parse, gives None. Strings
    without a digit ("now", "today") are not dates.
    """
    if not isinstance(value, (str, date)):
        return None
    if isinstance(value, str) and not re.search(r"\d", value):
        return None
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(ts):
        return None
    return int(ts.value // 1_000_000)


def latest_sample(rows: Sequence[Dict[str, Any]]) -> Optional[Tuple[int, Dict[str, Any]]]:
    """Return (time_ms, row) for the newest dated row; the first one wins a tie."""
    last_ms = None
    last_row = None
    for row in rows:
        t = parse_timestamp(row.get(DATE_FIELD))
        if t is None:
            continue
        if last_ms is None or t > last_ms:
            last_ms = t
            last_row = row
    if last_row is None:
        return None
    return last_ms, last_row


def classify_health(
    rows: Sequence[Dict[str, Any]],
    stale_ms: int,
    now_ms: int,
    good_cutoff: float = BACTERIA_CUTOFFS["good"],
    caution_cutoff: float = BACTERIA_CUTOFFS["caution"],
) -> str:
    """
    Classify a site as 'unknown', 'good', 'caution' or 'unhealthy'.

    Parameters
    ----------
    rows : sequence of dict
        The site's sample rows, in sheet order.
    stale_ms : int
        Maximum sample age, in milliseconds, that still counts.
    now_ms : int
        Reference time, epoch milliseconds.
    good_cutoff, caution_cutoff : float
        Inclusive upper bounds for the 'good' and 'caution' bands.
    """
    latest = latest_sample(rows)
    if latest is None:
        return "unknown"

    last_ms, last_row = latest
    if last_ms < now_ms - stale_ms:
        return "unknown"

    bact_val = _to_count(last_row.get(BACTERIA_FIELD))
    if bact_val is None:
        return "unknown"
    elif bact_val <= good_cutoff:
        return "good"
    elif bact_val <= caution_cutoff:
        return "caution"
    else:
        return "unhealthy"


def compute_health_summary(
    rows: Sequence[Dict[str, Any]],
    stale_ms: int = MAX_SAMPLE_AGE_MS,
    now_ms: Optional[int] = None,
) -> Dict:
    """
    Classify a site and collect what the dashboard shows next to it.

    Returns
    -------
    dict with keys: status, label, color, emoji, icon, latest_date,
                    bacterial_count, age_days
    """
    if now_ms is None:
        now_ms = current_time_ms()

    status = classify_health(rows, stale_ms, now_ms)
    level = STATUS_LEVELS[status]

    latest = latest_sample(rows)
    if latest is not None:
        last_ms, last_row = latest
        latest_date = last_row.get(DATE_FIELD)
        bacterial_count = _to_count(last_row.get(BACTERIA_FIELD))
        age_days = round((now_ms - last_ms) / MS_PER_DAY, 1)
    else:
        latest_date = None
        bacterial_count = None
        age_days = None

    return {
        "status": status,
        "label": level["label"],
        "color": level["color"],
        "emoji": level["emoji"],
        "icon": FLAG_ICONS[status],
        "latest_date": latest_date,
        "bacterial_count": bacterial_count,
        "age_days": age_days,
    }


def _to_count(value: Any) -> Optional[float]:
    """Bacterial count as a number; None when blank or not a number."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value
