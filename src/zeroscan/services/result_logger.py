# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from ..domain.errors import ErrorBudgetExceeded, PipelineAborted
from ..domain.models import ScanResult, ScanSummary
from ..ports.sink import ResultSinkPort
from .channel import Channel

logger = logging.getLogger(__name__)


class ResultLogger:
    """
    Single consumer of the results channel.

    Writes one `path,size,size,status` line per result to every sink and
    keeps the run summary. With `max_errors` set, the first error result
    past the limit sets the cancel token and records ErrorBudgetExceeded.
    A sink that raises (e.g. BrokenPipeError on a closed stdout) is recorded
    as the failure the same way and also sets the cancel token.
    """

    def __init__(
        self,
        sinks: Iterable[ResultSinkPort],
        block_size: int,
        *,
        cancel: Optional[threading.Event] = None,
        max_errors: Optional[int] = None,
    ) -> None:
        self._sinks = tuple(sinks)
        self._block_size = int(block_size)
        self._cancel = cancel
        self._max_errors = max_errors
        self.summary = ScanSummary()
        self.failure: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    def handle(self, result: ScanResult) -> None:
        line = result.to_log_line(self._block_size)
        for sink in self._sinks:
            sink.write(line)
        self.summary.record(result)
        if (
            self._max_errors is not None
            and self.failure is None
            and self.summary.errors > self._max_errors
        ):
            self.failure = ErrorBudgetExceeded(self.summary.errors, self._max_errors)
            logger.error("Aborting scan: %s", self.failure)
            if self._cancel is not None:
                self._cancel.set()

    def run(self, results: Channel[ScanResult]) -> ScanSummary:
        try:
            for result in results:
                self.handle(result)
        except PipelineAborted:
            logger.debug("Result logger stopping: pipeline aborted")
        except Exception as e:
            self._abort(e)
        return self.summary

    def _abort(self, exc: Exception) -> None:
        if self.failure is None:
            self.failure = exc
        logger.critical("Result logger hit a fatal error, aborting scan: %s", exc)
        if self._cancel is not None:
            self._cancel.set()

    def start(self, results: Channel[ScanResult]) -> None:
        self._thread = threading.Thread(
            target=self.run, args=(results,), name="zeroscan-results", daemon=True
        )
        self._thread.start()

    def join(self) -> None:
        if self._thread is not None:
            self._thread.join()
