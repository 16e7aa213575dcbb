"""
Google Sheets report repository.

Rows go to one of two tabs ("Individual", "Group") of a single spreadsheet,
each with a frozen 17-column header row.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import gspread
from google.oauth2.service_account import Credentials

from domain.models.report_event import REPORT_HEADERS
from repositories.interfaces import IReportRepository

logger = logging.getLogger("bet_bot.repositories.report")

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
HEADER_RANGE = "A1:Q1"


def normalize_private_key(raw_key: str) -> str:
    """Accept keys pasted with literal newlines or with '\\n' escapes."""
    return raw_key.replace("\\n", "\n") if "\\n" in raw_key else raw_key


def build_service_account_info(
    credentials_json: str = "",
    service_account_email: str = "",
    private_key: str = "",
) -> dict[str, Any] | None:
    """
    Build service account info from either a full JSON blob or an email + key pair.

    Returns:
        Info dict for Credentials.from_service_account_info, or None if
        neither form is configured
    """
    if credentials_json:
        return json.loads(credentials_json)
    if service_account_email and private_key:
        return {
            "type": "service_account",
            "client_email": service_account_email,
            "private_key": normalize_private_key(private_key),
            "token_uri": TOKEN_URI,
        }
    return None


class SheetsReportRepository(IReportRepository):
    """
    Report rows stored in a Google spreadsheet through gspread.

    The client and worksheets are opened lazily and cached; gspread is
    blocking, so callers run these methods in a worker thread.
    """

    def __init__(self, spreadsheet_id: str, service_account_info: dict[str, Any]):
        self.spreadsheet_id = spreadsheet_id
        self._service_account_info = service_account_info
        self._spreadsheet: gspread.Spreadsheet | None = None
        self._worksheets: dict[str, gspread.Worksheet] = {}

    @classmethod
    def from_config(
        cls,
        spreadsheet_id: str,
        credentials_json: str = "",
        service_account_email: str = "",
        private_key: str = "",
    ) -> SheetsReportRepository | None:
        """
        Returns:
            A repository, or None (with a warning) when credentials are missing
        """
        try:
            info = build_service_account_info(credentials_json, service_account_email, private_key)
        except ValueError as exc:
            logger.warning(f"Invalid GOOGLE_CREDENTIALS_JSON; reporting disabled: {exc}")
            return None
        if not spreadsheet_id or info is None:
            logger.warning("Missing Google Sheets configuration; reporting disabled until set.")
            return None
        return cls(spreadsheet_id, info)

    def _open(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            credentials = Credentials.from_service_account_info(
                self._service_account_info, scopes=SCOPES
            )
            client = gspread.authorize(credentials)
            self._spreadsheet = client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _worksheet(self, tab: str) -> gspread.Worksheet:
        worksheet = self._worksheets.get(tab)
        if worksheet is not None:
            return worksheet

        spreadsheet = self._open()
        try:
            worksheet = spreadsheet.worksheet(tab)
        except gspread.exceptions.WorksheetNotFound:
            logger.info(f"Creating report tab '{tab}'")
            worksheet = spreadsheet.add_worksheet(title=tab, rows=1000, cols=len(REPORT_HEADERS))

        if worksheet.row_values(1) != REPORT_HEADERS:
            worksheet.update(range_name=HEADER_RANGE, values=[REPORT_HEADERS])
            worksheet.freeze(rows=1)

        self._worksheets[tab] = worksheet
        return worksheet

    def ensure_tab(self, tab: str) -> None:
        self._worksheet(tab)

    def append_row(self, tab: str, row: list[Any]) -> None:
        worksheet = self._worksheet(tab)
        worksheet.append_row(row, value_input_option="RAW", insert_data_option="INSERT_ROWS")
