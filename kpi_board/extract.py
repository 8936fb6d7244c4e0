from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from kpi_board.classify import classify_label


logger = logging.getLogger(__name__)

SITE_CODES = ("scz", "lpz", "cbba", "tja", "embol")
VALUE_SLOTS: List[str] = [f"{site}-{kind}" for site in SITE_CODES for kind in ("meta", "real")]

LABEL_COLUMN = 1
VALUE_START_COLUMN = 2
VALUE_WIDTH = len(VALUE_SLOTS)

QUOTE_CHARS = "\"'"

Grid = List[List[Any]]
KpiValues = Dict[str, List[str]]


def clean_cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def normalize_display_value(value: object) -> str:
    """Clean a value for display.

    Wrapping quotes are stripped and a lone decimal comma becomes a period:
    "12,5" -> "12.5", '"7"' -> "7". Text that already has a period is kept.
    """
    s = clean_cell(value).strip(QUOTE_CHARS).strip()
    if "," in s and "." not in s:
        s = s.replace(",", ".")
    return s


def extract_kpi_values(
    grid: Optional[Sequence[Sequence[Any]]],
    label_col: int = LABEL_COLUMN,
    value_start: int = VALUE_START_COLUMN,
    width: int = VALUE_WIDTH,
) -> KpiValues:
    """Map each recognised KPI row of ``grid`` to its ``width`` value cells.

    Rows with fewer than two cells and rows whose label does not classify are
    skipped. Cells past the end of a row read as "". When two rows classify to
    the same KPI the later row wins.
    """
    data: KpiValues = {}
    for idx, raw in enumerate(grid or []):
        if raw is None or len(raw) < 2:
            continue
        row = [clean_cell(c) for c in raw]
        kpi_id = classify_label(row[label_col] if label_col < len(row) else "")
        if kpi_id is None:
            continue
        values = [row[i] if i < len(row) else "" for i in range(value_start, value_start + width)]
        if kpi_id in data:
            logger.debug("Row %d overwrites earlier values for %s", idx, kpi_id)
        data[kpi_id] = values
    return data


def grid_from_frame(frame: pd.DataFrame) -> Grid:
    if frame is None or frame.empty:
        return []
    return frame.astype(object).where(frame.notna(), "").astype(str).values.tolist()
