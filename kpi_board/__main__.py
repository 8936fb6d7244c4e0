"""Poll the configured KPI source and log the table after every cycle.

Usage:
    python -m kpi_board [--url URL] [--interval SECONDS] [--once]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from kpi_board.config import KpiBoardError, KpiSettings, configure_logging
from kpi_board.poller import KpiPoller
from kpi_board.presenter import KpiTable, TablePresenter
from kpi_board.sources import resolve_client_source

logger = logging.getLogger("kpi_board")


def main(argv=None) -> int:
    settings = KpiSettings.from_env()
    parser = argparse.ArgumentParser(prog="kpi_board", description="Poll KPI rows into the display table.")
    parser.add_argument("--url", default=None, help="KPI endpoint or public CSV export URL")
    parser.add_argument("--interval", type=float, default=settings.poll_interval, help="seconds between polls")
    parser.add_argument("--once", action="store_true", help="run a single cycle and exit")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    try:
        source = resolve_client_source(settings, args.url)
    except KpiBoardError as exc:
        logger.error("Cannot start: %s", exc.code)
        return 2

    table = KpiTable()
    poller = KpiPoller(source, TablePresenter(table), interval=args.interval)
    if args.once:
        ok = poller.poll_once()
        print(table.to_frame().to_string())
        return 0 if ok else 1

    poller.start()
    try:
        while poller.is_running:
            time.sleep(args.interval)
            if poller.last_success is not None:
                print(table.to_frame().to_string(), flush=True)
    except KeyboardInterrupt:
        logger.info("Stopping poller")
    finally:
        poller.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
