from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from kpi_board.config import DEFAULT_POLL_INTERVAL
from kpi_board.extract import Grid, KpiValues, extract_kpi_values
from kpi_board.presenter import TablePresenter
from kpi_board.sources import GridSource


logger = logging.getLogger(__name__)


class KpiPoller:
    """Fetch -> extract -> present, once per ``interval`` seconds.

    A failed cycle is logged and skipped; whatever the table showed before
    stays in place until the next successful cycle. There is no retry
    beyond the next tick.
    """

    def __init__(
        self,
        source: GridSource,
        presenter: TablePresenter,
        interval: float = DEFAULT_POLL_INTERVAL,
        extractor: Callable[[Grid], KpiValues] = extract_kpi_values,
    ):
        self.source = source
        self.presenter = presenter
        self.interval = interval
        self.extractor = extractor
        self.cycles = 0
        self.failures = 0
        self.last_success: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> bool:
        self.cycles += 1
        try:
            grid = self.source.fetch_grid()
            values = self.extractor(grid)
            self.presenter.present(values)
        except Exception as exc:
            self.failures += 1
            self.last_error = str(exc) or type(exc).__name__
            logger.exception("Poll cycle failed (%s source)", getattr(self.source, "name", "grid"))
            return False
        self.last_success = datetime.now()
        self.last_error = None
        logger.info("Table updated (%s) %s", getattr(self.source, "name", "grid"), self.last_success.strftime("%H:%M:%S"))
        return True

    def _run(self, stop: threading.Event) -> None:
        self.poll_once()
        while not stop.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        if self.is_running:
            if not self._stop.is_set():
                return
            # A stopped thread may still be inside its last fetch.
            self._thread.join()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop,), name="kpi-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None
