from __future__ import annotations

import unicodedata
from typing import Callable, List, Optional, Tuple


KPI_IDS: Tuple[str, ...] = (
    "ltir",
    "reclamos",
    "servicio",
    "costo-transf",
    "bodega",
    "plan",
    "auditorias",
)


def normalize_label(label: object) -> str:
    """Lower-case and strip accents so "Nível" and "nivel" compare equal."""
    s = unicodedata.normalize("NFD", str(label).lower())
    return "".join(ch for ch in s if not "\u0300" <= ch <= "\u036f")


def _has(*words: str) -> Callable[[str], bool]:
    return lambda s: all(w in s for w in words)


def _has_any(*words: str) -> Callable[[str], bool]:
    return lambda s: any(w in s for w in words)


# First match wins.
KPI_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_has("ltir"), "ltir"),
    (_has("reclamos"), "reclamos"),
    (_has_any("nivel", "servicio"), "servicio"),
    (_has("costo", "transform"), "costo-transf"),
    (_has("costo", "bodega"), "bodega"),
    (_has("ejecucion", "plan"), "plan"),
    (_has("auditor"), "auditorias"),
]


def classify_label(label: object) -> Optional[str]:
    if label is None or label == "":
        return None
    s = normalize_label(label)
    for matches, kpi_id in KPI_RULES:
        if matches(s):
            return kpi_id
    return None
