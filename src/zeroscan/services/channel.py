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

import queue
import threading
import time
from typing import Generic, Iterator, Optional, TypeVar

from ..domain.errors import ChannelClosed, PipelineAborted

T = TypeVar("T")

_CLOSED = object()
POLL_SECONDS = 0.1


class Channel(Generic[T]):
    """
    Bounded FIFO between pipeline stages.

      - put() blocks while the channel is full (backpressure)
      - close() means no more items; consumers drain what is left, then stop
      - every blocking call wakes up periodically to check the cancel token
        and raises PipelineAborted once it is set
    """

    def __init__(self, capacity: int, cancel: Optional[threading.Event] = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._cancel = cancel or threading.Event()
        self._closed = threading.Event()

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, item: T) -> None:
        if self._closed.is_set():
            raise ChannelClosed("put on closed channel")
        self._put(item)

    def _put(self, item: object) -> None:
        while True:
            if self._cancel.is_set():
                raise PipelineAborted("pipeline cancelled")
            try:
                self._queue.put(item, timeout=POLL_SECONDS)
                return
            except queue.Full:
                continue

    def close(self) -> None:
        """Idempotent. Pushes one close marker that consumers hand on to each other."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._put(_CLOSED)

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Return the next item.

        Raises:
            ChannelClosed: channel closed and drained.
            queue.Empty: `timeout` elapsed with nothing to read.
            PipelineAborted: cancel token set while waiting.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._cancel.is_set():
                raise PipelineAborted("pipeline cancelled")
            wait = POLL_SECONDS
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise queue.Empty
                wait = min(wait, remaining)
            try:
                item = self._queue.get(timeout=wait)
            except queue.Empty:
                continue
            if item is _CLOSED:
                # Leave the marker for the next consumer.
                self._queue.put(_CLOSED)
                raise ChannelClosed("channel closed")
            return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return
