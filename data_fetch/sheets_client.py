"""
BeachWatch — Google Sheets Client

Reads worksheets from a published Google spreadsheet through the
visualization API's CSV export:

    https://docs.google.com/spreadsheets/d/<key>/gviz/tq?tqx=out:csv&sheet=<name>

- No API key required (the spreadsheet must be published / link-shared)
- One request per worksheet
- Header row becomes the column names, blank cells become None
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import requests

from config.constants import (
    DATA_SHEET,
    DATE_FIELD,
    GOOGLE_SHEETS_CSV,
    HTTP_TIMEOUT_S,
    LABELS_SHEET,
    SITES_SHEET,
)
from config.demo_sites import DEMO_LABELS, DEMO_SAMPLES, DEMO_SITES
from data_fetch.exceptions import SheetsConnectionError, SheetsQueryError

logger = logging.getLogger(__name__)


@dataclass
class Sheet:
    """One worksheet: ordered column names and one dict per data row."""

    name: str
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)


def frame_to_sheet(name: str, df: pd.DataFrame) -> Sheet:
    """Convert a parsed worksheet to a Sheet, mapping NaN cells to None."""
    df = df.dropna(how="all")
    df.columns = [str(c).strip() for c in df.columns]
    # object dtype so the None survives in numeric columns
    clean = df.astype(object).where(df.notna(), None)
    return Sheet(name=name, columns=list(clean.columns), rows=clean.to_dict("records"))


class SheetsClient:
    """Client for published Google spreadsheets."""

    def __init__(self, timeout: int = HTTP_TIMEOUT_S):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "text/csv",
            "Cache-Control": "no-cache",
        })

    def fetch(self, key: str, wanted: Iterable[str]) -> Dict[str, Sheet]:
        """Fetch each wanted worksheet of spreadsheet ``key``, keyed by name."""
        sheets = {name: self.get_sheet(key, name) for name in wanted}
        logger.info(
            "Fetched %s from spreadsheet %s",
            ", ".join(f"{n} ({len(s.rows)} rows)" for n, s in sheets.items()),
            key,
        )
        return sheets

    def get_sheet(self, key: str, name: str) -> Sheet:
        url = GOOGLE_SHEETS_CSV.format(key=key)
        params = {"tqx": "out:csv", "sheet": name}

        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise SheetsConnectionError(f"Request timeout after {self.timeout}s") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status in (400, 404):
                raise SheetsQueryError(f"Worksheet '{name}' not found in {key}") from e
            raise SheetsConnectionError(f"HTTP error {status}: {e}") from e
        except requests.RequestException as e:
            raise SheetsConnectionError(f"Network error: {e}") from e

        text = resp.text
        # Unpublished spreadsheets answer with a sign-in page instead of CSV
        if text.lstrip().startswith("<"):
            raise SheetsQueryError(f"Spreadsheet {key} is not published")

        try:
            df = pd.read_csv(io.StringIO(text))
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            raise SheetsQueryError(f"Unreadable worksheet '{name}': {e}") from e

        return frame_to_sheet(name, df)


class DemoSheetsClient:
    """Serves the bundled demo workbook through the SheetsClient interface."""

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()

    def fetch(self, key: str, wanted: Iterable[str]) -> Dict[str, Sheet]:
        workbook = self._workbook()
        sheets = {}
        for name in wanted:
            if name not in workbook:
                raise SheetsQueryError(f"Worksheet '{name}' not found in demo workbook")
            sheets[name] = workbook[name]
        return sheets

    def _workbook(self) -> Dict[str, Sheet]:
        samples = []
        for entry in DEMO_SAMPLES:
            row = {k: v for k, v in entry.items() if k != "dias"}
            sampled_on = self.today - timedelta(days=entry["dias"])
            row[DATE_FIELD] = sampled_on.strftime("%Y-%m-%d")
            samples.append(row)

        return {
            DATA_SHEET: Sheet(DATA_SHEET, list(samples[0].keys()), samples),
            SITES_SHEET: Sheet(
                SITES_SHEET,
                list(DEMO_SITES[0].keys()),
                [dict(site) for site in DEMO_SITES],
            ),
            LABELS_SHEET: Sheet(LABELS_SHEET, list(DEMO_LABELS.keys()), [dict(DEMO_LABELS)]),
        }
