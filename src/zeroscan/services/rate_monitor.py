# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Callable, Optional

from ..config import RATE_INTERVAL
from ..domain.errors import ChannelClosed, PipelineAborted
from .channel import Channel

logger = logging.getLogger(__name__)


def _log_rate(count: int, interval: float) -> None:
    if interval == 1.0:
        logger.info("Handled %d chunks last second", count)
    else:
        logger.info("Handled %d chunks in the last %.1fs", count, interval)


class RateMonitor:
    """
    Counts progress signals and reports the count once per interval.

    If the report callback raises, the error is kept in `failure` and the
    cancel token is set, so the rest of the pipeline unwinds.
    """

    def __init__(
        self,
        interval: float = RATE_INTERVAL,
        report: Optional[Callable[[int, float], None]] = None,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        self._interval = float(interval)
        self._report = report or _log_rate
        self._cancel = cancel
        self.total = 0
        self.failure: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    def run(self, progress: Channel[None]) -> int:
        counter = 0
        deadline = time.monotonic() + self._interval
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._report(counter, self._interval)
                    counter = 0
                    deadline += self._interval
                    continue
                try:
                    progress.get(timeout=remaining)
                except queue.Empty:
                    continue
                counter += 1
                self.total += 1
        except ChannelClosed:
            if counter:
                self._flush(counter)
        except PipelineAborted:
            logger.debug("Rate monitor stopping: pipeline aborted")
        except Exception as e:
            self._abort(e)
        return self.total

    def _flush(self, counter: int) -> None:
        try:
            self._report(counter, self._interval)
        except Exception as e:
            self._abort(e)

    def _abort(self, exc: Exception) -> None:
        if self.failure is None:
            self.failure = exc
        logger.critical("Rate monitor hit a fatal error, aborting scan: %s", exc)
        if self._cancel is not None:
            self._cancel.set()

    def start(self, progress: Channel[None]) -> None:
        self._thread = threading.Thread(
            target=self.run, args=(progress,), name="zeroscan-rate", daemon=True
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
