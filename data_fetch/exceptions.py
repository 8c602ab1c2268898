"""
Exceptions for spreadsheet fetching.
"""

from typing import Dict


class SheetsError(Exception):
    """Base exception for spreadsheet errors."""

    pass


class SheetsConnectionError(SheetsError):
    """Error reaching the spreadsheet service."""

    pass


class SheetsQueryError(SheetsError):
    """Spreadsheet or worksheet not found, or an unreadable response."""

    pass


class PipelineError(Exception):
    """One or both spreadsheet fetches failed.

    ``errors`` maps each fetch ("data", "labels") to the exception it
    raised, so both failures are reported together.
    """

    def __init__(self, errors: Dict[str, Exception]):
        self.errors = errors
        detail = "; ".join(f"{name}: {err}" for name, err in errors.items())
        super().__init__(f"Spreadsheet fetch failed ({detail})")
