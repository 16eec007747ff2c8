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
from typing import List, Optional

from ..domain.errors import PipelineAborted
from ..domain.models import FileJob, ScanResult
from ..ports.filesystem import FilesystemPort
from .channel import Channel
from .zero_block_scanner import ZeroBlockScanner

logger = logging.getLogger(__name__)

PROGRESS = None  # progress signals carry no payload


class WorkerPool:
    """
    Fixed set of threads that scan one file at a time.

    Each worker pulls FileJobs until the job channel is closed and drained,
    and pushes exactly one ScanResult per job. Files that cannot be opened
    produce an error result instead of stopping the pool. A scanner fault
    (AlignmentError) is fatal: it is stored, the cancel token is set, and
    every stage unwinds.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        scanner: ZeroBlockScanner,
        size: int,
        *,
        cancel: threading.Event,
    ) -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self._fs = fs
        self._scanner = scanner
        self._size = int(size)
        self._cancel = cancel
        self._threads: List[threading.Thread] = []
        self._fatal: Optional[BaseException] = None
        self._fatal_lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    @property
    def fatal(self) -> Optional[BaseException]:
        return self._fatal

    def start(
        self,
        jobs: Channel[FileJob],
        results: Channel[ScanResult],
        progress: Optional[Channel[None]] = None,
    ) -> None:
        if self._threads:
            raise RuntimeError("worker pool already started")
        for idx in range(self._size):
            thread = threading.Thread(
                target=self._worker,
                args=(idx + 1, jobs, results, progress),
                name=f"zeroscan-worker-{idx + 1}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Started %d workers", self._size)

    def join(self) -> None:
        for thread in self._threads:
            thread.join()

    def scan_job(self, job: FileJob, progress: Optional[Channel[None]] = None) -> ScanResult:
        """Scan a single job. OS errors become an error result; scanner faults propagate."""
        on_chunk = (lambda: progress.put(PROGRESS)) if progress is not None else None
        try:
            with self._fs.open_binary(job.path) as fh:
                zero_blocks = self._scanner.scan(
                    fh, size=job.size, name=str(job.path), on_chunk=on_chunk
                )
        except OSError as e:
            logger.warning("Scan of %s failed: %s", job.path, e)
            return ScanResult(path=job.path, size=job.size, error=e.strerror or str(e))
        return ScanResult(path=job.path, size=job.size, zero_blocks=zero_blocks)

    def _worker(
        self,
        worker_id: int,
        jobs: Channel[FileJob],
        results: Channel[ScanResult],
        progress: Optional[Channel[None]],
    ) -> None:
        try:
            for job in jobs:
                results.put(self.scan_job(job, progress))
        except PipelineAborted:
            logger.debug("Worker %d stopping: pipeline aborted", worker_id)
        except Exception as e:
            self._abort(worker_id, e)

    def _abort(self, worker_id: int, exc: BaseException) -> None:
        with self._fatal_lock:
            if self._fatal is None:
                self._fatal = exc
        logger.critical("Worker %d hit a fatal error, aborting scan: %s", worker_id, exc)
        self._cancel.set()
