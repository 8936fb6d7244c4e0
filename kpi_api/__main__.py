"""Serve the KPI endpoint.

Usage:
    python -m kpi_api [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import sys

import uvicorn

from kpi_board.config import KpiSettings, configure_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="kpi_api", description="Serve GET /api/kpi.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    settings = KpiSettings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run("kpi_api.main:app", host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
