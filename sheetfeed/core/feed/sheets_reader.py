"""
Google Sheets reader for feed generation.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

import gspread
from gspread.exceptions import GSpreadException, WorksheetNotFound
from google.auth.exceptions import GoogleAuthError


logger = logging.getLogger(__name__)

READONLY_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class SheetSourceError(Exception):
    """Sheet data could not be obtained. Fatal to a generation run."""


class SheetSource(Protocol):
    def fetch(self, sheet_name: str) -> List[List[str]]:
        """Return every row of a sheet, header included."""
        ...


def load_service_account_info(raw: Optional[str]) -> Dict[str, Any]:
    """
    Parse service account credentials.

    Args:
        raw: The JSON key itself, or the same JSON base64 encoded

    Returns:
        Credentials dict for gspread.

    Raises:
        SheetSourceError: If the key is missing or cannot be decoded.
    """
    if not raw or not raw.strip():
        raise SheetSourceError("Service account key is not configured (GCP_SERVICE_ACCOUNT_KEY)")

    text = raw.strip()
    if not text.startswith('{'):
        try:
            text = base64.b64decode(text, validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SheetSourceError(f"Service account key is neither JSON nor base64 JSON: {e}") from e

    try:
        info = json.loads(text)
    except json.JSONDecodeError as e:
        raise SheetSourceError(f"Invalid service account JSON: {e}") from e

    if not isinstance(info, dict):
        raise SheetSourceError("Service account key must be a JSON object")
    return info


class GoogleSheetSource:
    """Reads worksheets of one spreadsheet through gspread."""

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_info: Optional[Dict[str, Any]] = None,
        client: Optional[gspread.Client] = None
    ):
        self.spreadsheet_id = spreadsheet_id
        self._credentials_info = credentials_info
        self._client = client
        self._spreadsheet = None

    def _open(self):
        if self._spreadsheet is not None:
            return self._spreadsheet
        try:
            if self._client is None:
                self._client = gspread.service_account_from_dict(
                    self._credentials_info or {},
                    scopes=READONLY_SCOPES
                )
            logger.info(f"Opening spreadsheet {self.spreadsheet_id}")
            self._spreadsheet = self._client.open_by_key(self.spreadsheet_id)
        except (GSpreadException, GoogleAuthError, ValueError, OSError) as e:
            raise SheetSourceError(
                f"Cannot open spreadsheet {self.spreadsheet_id}: {type(e).__name__}: {e}"
            ) from e
        return self._spreadsheet

    def fetch(self, sheet_name: str) -> List[List[str]]:
        spreadsheet = self._open()
        try:
            worksheet = spreadsheet.worksheet(sheet_name)
            rows = worksheet.get_all_values()
        except WorksheetNotFound as e:
            raise SheetSourceError(f"Sheet '{sheet_name}' not found in {self.spreadsheet_id}") from e
        except (GSpreadException, GoogleAuthError, OSError) as e:
            raise SheetSourceError(
                f"Error reading sheet '{sheet_name}': {type(e).__name__}: {e}"
            ) from e
        logger.debug(f"Fetched {len(rows)} rows from '{sheet_name}'")
        return rows or []


class StaticSheetSource:
    """In-memory source, keyed by sheet name."""

    def __init__(self, sheets: Mapping[str, List[List[str]]]):
        self.sheets = dict(sheets)

    def fetch(self, sheet_name: str) -> List[List[str]]:
        if sheet_name not in self.sheets:
            raise SheetSourceError(f"Sheet '{sheet_name}' not found")
        return [list(row) for row in self.sheets[sheet_name]]
