from __future__ import annotations

from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from kpi_board.extract import SITE_CODES, VALUE_SLOTS, normalize_display_value

alt.data_transformers.disable_max_rows()

KIND_LABELS = {"meta": "Meta", "real": "Real"}


def kpi_long_frame(values: Sequence[object]) -> pd.DataFrame:
    """One row per (site, meta/real) with the value parsed as a number (blank -> NaN)."""
    records = []
    for i, slot in enumerate(VALUE_SLOTS):
        site, kind = slot.rsplit("-", 1)
        raw = normalize_display_value(values[i]) if i < len(values) else ""
        records.append({"site": site.upper(), "kind": KIND_LABELS[kind], "value": raw})
    df = pd.DataFrame(records)
    df["value"] = pd.to_numeric(df["value"].str.rstrip("%"), errors="coerce")
    return df


def kpi_site_chart(title: str, values: Sequence[object]) -> alt.Chart:
    df = kpi_long_frame(values)
    return (
        alt.Chart(df.dropna(subset=["value"]))
        .mark_bar()
        .encode(
            x=alt.X("site:N", title="Site", sort=[s.upper() for s in SITE_CODES]),
            xOffset="kind:N",
            y=alt.Y("value:Q", title=title),
            color=alt.Color("kind:N", title=""),
            tooltip=["site", "kind", "value"],
        )
        .properties(height=260)
    )


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()
