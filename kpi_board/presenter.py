from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from kpi_board.classify import classify_label
from kpi_board.extract import VALUE_SLOTS, normalize_display_value


logger = logging.getLogger(__name__)

DEFAULT_ROW_LABELS: List[str] = [
    "LTIR",
    "Reclamos de clientes",
    "Nivel de Servicio",
    "Costo de Transformación",
    "Costo de Bodega",
    "Ejecución del Plan",
    "Auditorías",
]

HIGHLIGHT_SECONDS = 0.7

Cell = Tuple[str, str]


class KpiTable:
    """The display: one row per KPI label, one column per value slot."""

    def __init__(self, labels: Iterable[str] = DEFAULT_ROW_LABELS, slots: Sequence[str] = VALUE_SLOTS):
        labels = [str(label).strip() for label in labels]
        self.frame = pd.DataFrame("", index=pd.Index(labels, name="kpi"), columns=list(slots), dtype=object)
        self._highlights: Dict[Cell, float] = {}

    @property
    def labels(self) -> List[str]:
        return [str(x) for x in self.frame.index]

    @property
    def slots(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    def row_values(self, label: str) -> List[str]:
        return [str(v) for v in self.frame.loc[label].tolist()]

    def set_cell(self, label: str, slot: str, value: str, highlight_until: Optional[float] = None) -> None:
        self.frame.at[label, slot] = value
        if highlight_until is not None:
            self._highlights[(label, slot)] = highlight_until

    def highlighted(self, now: Optional[float] = None) -> List[Cell]:
        now = time.monotonic() if now is None else now
        expired = [cell for cell, until in self._highlights.items() if until <= now]
        for cell in expired:
            del self._highlights[cell]
        return list(self._highlights)

    def to_frame(self) -> pd.DataFrame:
        return self.frame.copy()


class TablePresenter:
    def __init__(self, table: KpiTable, highlight_seconds: float = HIGHLIGHT_SECONDS):
        self.table = table
        self.highlight_seconds = highlight_seconds

    def row_map(self) -> Dict[str, str]:
        rows: Dict[str, str] = {}
        for label in self.table.labels:
            kpi_id = classify_label(label)
            if kpi_id:
                rows[kpi_id] = label
        return rows

    def fill_row(self, label: str, values: Sequence[object], now: Optional[float] = None) -> None:
        now = time.monotonic() if now is None else now
        until = now + self.highlight_seconds if self.highlight_seconds > 0 else None
        for i, slot in enumerate(self.table.slots):
            value = values[i] if i < len(values) else ""
            self.table.set_cell(label, slot, normalize_display_value(value), highlight_until=until)

    def present(self, values: Mapping[str, Sequence[object]]) -> List[str]:
        """Write extracted values into their display rows and return the KPI ids updated."""
        rows = self.row_map()
        now = time.monotonic()
        updated: List[str] = []
        for kpi_id, kpi_values in values.items():
            label = rows.get(kpi_id)
            if label is None:
                logger.warning("No display row for %s", kpi_id)
                continue
            self.fill_row(label, kpi_values, now=now)
            updated.append(kpi_id)
        return updated
