"""
BeachWatch — Data Pipeline Orchestrator
Fetches the sample/site spreadsheet and the label spreadsheet together and
returns them once both have arrived.
"""

import logging
from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Dict, Optional

from config.constants import DATA_SHEET, LABELS_SHEET, SITES_SHEET
from data_fetch.exceptions import PipelineError
from data_fetch.sheets_client import SheetsClient

logger = logging.getLogger(__name__)


class DataPipeline:
    def __init__(self, client=None, label_client=None):
        self.client = client or SheetsClient()
        self.label_client = label_client or self.client

    def fetch_all(self, data_key: str, label_key: str) -> Dict:
        """
        Fetch both spreadsheets concurrently and wait for both to finish.

        Returns
        -------
        dict with keys: data ({"datos": Sheet, "sitios": Sheet}),
        labels ({"etiquetas": Sheet}), fetched_at.

        Raises
        ------
        PipelineError
            if either fetch failed; carries every failure, not just the first.
        """
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = {
                "data": pool.submit(self.client.fetch, data_key, [DATA_SHEET, SITES_SHEET]),
                "labels": pool.submit(self.label_client.fetch, label_key, [LABELS_SHEET]),
            }
            wait(futures.values(), return_when=ALL_COMPLETED)

        errors = {}
        results = {}
        for name, future in futures.items():
            err: Optional[BaseException] = future.exception()
            if err is not None:
                logger.error("Fetching %s spreadsheet failed: %s", name, err)
                errors[name] = err
            else:
                results[name] = future.result()

        if errors:
            raise PipelineError(errors)

        return {
            "data": results["data"],
            "labels": results["labels"],
            "fetched_at": datetime.now().isoformat(),
        }
