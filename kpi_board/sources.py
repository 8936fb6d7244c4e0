from __future__ import annotations

import csv
import io
import logging
import time
from typing import Any, Dict, Optional

import pandas as pd
import requests
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from kpi_board.config import ConfigError, KpiBoardError, KpiSettings
from kpi_board.extract import Grid, grid_from_frame


logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
REQUEST_TIMEOUT = 10
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class SourceError(KpiBoardError):
    code = "SOURCE_ERROR"


class GridSource:
    """Anything that can produce the current grid of cells."""

    name = "grid"

    def fetch_grid(self) -> Grid:
        raise NotImplementedError


def _cache_buster() -> Dict[str, int]:
    return {"t": int(time.time() * 1000)}


def _get_fresh(url: str, timeout: float) -> requests.Response:
    resp = requests.get(url, params=_cache_buster(), headers=NO_CACHE_HEADERS, timeout=timeout)
    resp.raise_for_status()
    return resp


def parse_csv_grid(text: str) -> Grid:
    """Parse a delimited export into a grid; blank lines are dropped and short rows padded with ""."""
    if not text or not text.strip():
        return []
    # read_csv sizes columns from the first row and rejects longer rows, so the width is taken from the widest row.
    width = max((len(r) for r in csv.reader(io.StringIO(text))), default=0)
    if width == 0:
        return []
    frame = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    return grid_from_frame(frame)


class SheetsGridSource(GridSource):
    name = "sheets"

    def __init__(self, credentials_info: Dict[str, Any], spreadsheet_id: str, sheet_range: str):
        self.credentials_info = credentials_info
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self._service = None

    @classmethod
    def from_settings(cls, settings: KpiSettings) -> "SheetsGridSource":
        return cls(settings.service_account_info(), settings.spreadsheet_id, settings.sheet_range)

    def _sheets(self):
        if self._service is None:
            creds = Credentials.from_service_account_info(self.credentials_info, scopes=SCOPES)
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    def fetch_grid(self) -> Grid:
        resp = (
            self._sheets()
            .spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=self.sheet_range)
            .execute()
        )
        return resp.get("values", []) or []


class CsvGridSource(GridSource):
    name = "csv"

    def __init__(self, url: str, timeout: float = REQUEST_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def fetch_grid(self) -> Grid:
        resp = _get_fresh(self.url, self.timeout)
        return parse_csv_grid(resp.text)


class KpiApiGridSource(GridSource):
    """Reads the raw grid back from the ``/api/kpi`` endpoint."""

    name = "api"

    def __init__(self, url: str, timeout: float = REQUEST_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def fetch_grid(self) -> Grid:
        resp = _get_fresh(self.url, self.timeout)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise SourceError("Bad API response") from exc
        if not isinstance(payload, dict) or not payload.get("ok") or not isinstance(payload.get("rows"), list):
            raise SourceError("Bad API response")
        return payload["rows"]


def _looks_like_csv(url: str) -> bool:
    lowered = url.lower()
    return lowered.split("?", 1)[0].endswith(".csv") or "output=csv" in lowered or "format=csv" in lowered


def source_for_url(url: str) -> GridSource:
    return CsvGridSource(url) if _looks_like_csv(url) else KpiApiGridSource(url)


def resolve_client_source(settings: KpiSettings, url: Optional[str] = None) -> GridSource:
    """Pick a grid source: explicit URL, then KPI_API_URL, then KPI_CSV_URL, then the Sheets config."""
    if url:
        return source_for_url(url)
    if settings.api_url:
        return KpiApiGridSource(settings.api_url)
    if settings.csv_url:
        return CsvGridSource(settings.csv_url)
    if settings.has_sheet_config:
        return SheetsGridSource.from_settings(settings)
    raise ConfigError()
