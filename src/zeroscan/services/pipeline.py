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

import enum
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config import ScanSettings
from ..domain.errors import PipelineAborted
from ..domain.models import FileJob, ScanResult, ScanSummary
from ..ports.filesystem import FilesystemPort
from ..ports.sink import ResultSinkPort
from .channel import Channel
from .directory_walker import DirectoryWalker
from .rate_monitor import RateMonitor
from .result_logger import ResultLogger
from .worker_pool import WorkerPool
from .zero_block_scanner import ZeroBlockScanner

logger = logging.getLogger(__name__)


class PipelinePhase(enum.Enum):
    IDLE = "idle"
    FEEDING = "feeding"
    DRAINING = "draining"
    DONE = "done"


class ScanPipeline:
    """
    Orchestrates a zero-block scan:
      - walks the tree on the calling thread and feeds the job channel
      - N workers scan files and emit results + per-chunk progress signals
      - one result logger writes lines to the sinks
      - one rate monitor reports chunks handled per interval

    Shutdown is drain-then-close: jobs closed after the walk, workers joined,
    then progress and results closed and their consumers joined.

    Raises from run():
      AlignmentError (or any other worker fault) when a worker aborted the run,
      ErrorBudgetExceeded when more files failed than settings.max_errors,
      whatever a sink or the rate reporter raised when that stage died.
    """

    def __init__(
        self,
        settings: ScanSettings,
        fs: FilesystemPort,
        sinks: Iterable[ResultSinkPort],
        *,
        rate_report: Optional[Callable[[int, float], None]] = None,
    ) -> None:
        self._settings = settings.validate()
        self._fs = fs
        self._sinks = tuple(sinks)
        self._rate_report = rate_report
        self.phase = PipelinePhase.IDLE

    def run(self, root: Optional[Path] = None) -> ScanSummary:
        settings = self._settings
        root = Path(root if root is not None else settings.root)
        n = settings.parallelism
        cancel = threading.Event()

        jobs: Channel[FileJob] = Channel(n, cancel)
        results: Channel[ScanResult] = Channel(n, cancel)
        progress: Channel[None] = Channel(n, cancel)

        scanner = ZeroBlockScanner(settings.chunk_size, settings.block_size)
        pool = WorkerPool(self._fs, scanner, n, cancel=cancel)
        result_logger = ResultLogger(
            self._sinks, settings.block_size, cancel=cancel, max_errors=settings.max_errors
        )
        monitor = RateMonitor(settings.rate_interval, self._rate_report, cancel=cancel)

        result_logger.start(results)
        monitor.start(progress)
        pool.start(jobs, results, progress)

        submitted = 0
        self.phase = PipelinePhase.FEEDING
        logger.debug("Scanning %s with %d workers", root, n)
        try:
            submitted = DirectoryWalker(self._fs).feed(root, jobs)
            self.phase = PipelinePhase.DRAINING
            jobs.close()
            pool.join()
            progress.close()
            results.close()
        except PipelineAborted:
            logger.debug("Feeding stopped: pipeline aborted")
        except BaseException:
            cancel.set()
            raise
        finally:
            pool.join()
            result_logger.join()
            monitor.join()
            self.phase = PipelinePhase.DONE

        if pool.fatal is not None:
            raise pool.fatal
        if result_logger.failure is not None:
            raise result_logger.failure
        if monitor.failure is not None:
            raise monitor.failure

        summary = result_logger.summary
        summary.chunks = monitor.total
        if summary.files != submitted:
            logger.error("Submitted %d jobs but logged %d results", submitted, summary.files)
        return summary
