"""Settings, error codes and logging setup.

Values come from the environment:

- ``SERVICE_ACCOUNT_KEY``: service-account JSON payload
- ``SPREADSHEET_ID``: spreadsheet to read
- ``SHEET_RANGE``: optional range, defaults to 100 rows x 12 columns
- ``KPI_API_URL`` / ``KPI_CSV_URL``: where a client reads the grid from
- ``KPI_POLL_INTERVAL``: seconds between poll cycles
- ``KPI_LOG_LEVEL``: logging level name
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


DEFAULT_SHEET_RANGE = "Sheet1!A1:L100"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_API_PATH = "/api/kpi"

CONFIG_MISSING = "CONFIG_MISSING"
INVALID_SERVICE_KEY = "INVALID_SERVICE_KEY"

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class KpiBoardError(Exception):
    code = "KPI_BOARD_ERROR"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.code)


class ConfigError(KpiBoardError):
    code = CONFIG_MISSING


class InvalidServiceKeyError(KpiBoardError):
    code = INVALID_SERVICE_KEY


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _as_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        out = float(value)
    except Exception:
        return default
    return out if out > 0 else default


@dataclass(frozen=True)
class KpiSettings:
    service_account_key: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    sheet_range: str = DEFAULT_SHEET_RANGE
    api_url: Optional[str] = None
    csv_url: Optional[str] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KpiSettings":
        env = os.environ if environ is None else environ
        return cls(
            service_account_key=_clean(env.get("SERVICE_ACCOUNT_KEY")),
            spreadsheet_id=_clean(env.get("SPREADSHEET_ID")),
            sheet_range=_clean(env.get("SHEET_RANGE")) or DEFAULT_SHEET_RANGE,
            api_url=_clean(env.get("KPI_API_URL")),
            csv_url=_clean(env.get("KPI_CSV_URL")),
            poll_interval=_as_float(env.get("KPI_POLL_INTERVAL"), DEFAULT_POLL_INTERVAL),
            log_level=(_clean(env.get("KPI_LOG_LEVEL")) or "INFO").upper(),
        )

    @property
    def has_sheet_config(self) -> bool:
        return bool(self.service_account_key and self.spreadsheet_id)

    def require_sheet_config(self) -> None:
        if not self.has_sheet_config:
            raise ConfigError()

    def service_account_info(self) -> Dict[str, Any]:
        """Parse the credential payload, raising ``InvalidServiceKeyError`` when it is not a JSON object."""
        self.require_sheet_config()
        try:
            info = json.loads(self.service_account_key, strict=False)
        except (TypeError, ValueError) as exc:
            raise InvalidServiceKeyError() from exc
        if not isinstance(info, dict):
            raise InvalidServiceKeyError()
        return info


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
