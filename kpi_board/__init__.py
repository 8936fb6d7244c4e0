"""Core (UI-agnostic) KPI board logic.

This package contains:
- label classification (row label -> KPI identifier)
- row extraction (grid -> ten value slots per KPI)
- grid sources (Google Sheets, CSV export, KPI endpoint)
- the display table presenter and the poll driver
- chart helpers (Altair -> Vega-Lite spec dict)
"""
