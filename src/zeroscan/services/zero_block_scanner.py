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
import os
from functools import lru_cache
from typing import BinaryIO, Callable, Optional

from ..config import BLOCK_SIZE, CHUNK_SIZE
from ..domain.errors import AlignmentError, ConfigurationError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def zero_reference(size: int) -> bytes:
    """
    Shared all-zero buffer of `size` bytes.

    bytes are immutable, so every worker thread can compare against the
    same cached object without locking.
    """
    return bytes(size)


def _stream_size(stream: BinaryIO) -> int:
    try:
        return os.fstat(stream.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        pass
    # Not a real file (BytesIO and friends): seek to the end and back.
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos, os.SEEK_SET)
    return size


class ZeroBlockScanner:
    """
    Counts block-sized windows of a stream that are entirely zero.

    Each window is checked in two steps: read a small probe chunk first and
    only read the rest of the block when the probe is all zero. Windows whose
    probe has data are skipped with a seek, so a typical file costs one
    chunk read per block.

    Note:
      * The cursor must sit on a chunk boundary before every probe (or at
        end of file). Anything else is a bookkeeping bug and raises
        AlignmentError.
      * A short probe or tail ends the scan. A partial final block is never
        counted, even if it is all zero.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, block_size: int = BLOCK_SIZE) -> None:
        if chunk_size < 1 or block_size <= chunk_size or block_size % chunk_size:
            raise ConfigurationError(
                f"block size ({block_size}) must be a multiple of, and larger than, "
                f"chunk size ({chunk_size})"
            )
        self._chunk_size = int(chunk_size)
        self._block_size = int(block_size)
        self._tail_size = self._block_size - self._chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def block_size(self) -> int:
        return self._block_size

    def scan(
        self,
        stream: BinaryIO,
        *,
        size: Optional[int] = None,
        name: str = "<stream>",
        on_chunk: Optional[Callable[[], None]] = None,
    ) -> int:
        """
        Scan `stream` from its current position and return the number of zero blocks.

        Args:
            size: expected stream length; looked up from the stream when omitted.
            name: used in diagnostics only.
            on_chunk: called once per completed window compare (progress signal).
        """
        if size is None:
            size = _stream_size(stream)
        zero_blocks = 0

        while True:
            offset = stream.tell()
            if offset % self._chunk_size != 0 and offset != size:
                raise AlignmentError(name, offset, self._chunk_size)

            probe = stream.read(self._chunk_size)
            if not probe:
                return zero_blocks
            if len(probe) != self._chunk_size:
                self._short_read(name, self._chunk_size, len(probe), stream.tell(), size)
                return zero_blocks

            if probe == zero_reference(self._chunk_size):
                tail = stream.read(self._tail_size)
                if len(tail) != self._tail_size:
                    if tail:
                        self._short_read(name, self._tail_size, len(tail), stream.tell(), size)
                    return zero_blocks
                if tail == zero_reference(self._tail_size):
                    logger.debug(
                        "Found zero block in %s at offset %d (%d bytes)",
                        name,
                        offset,
                        self._block_size,
                    )
                    zero_blocks += 1
            else:
                stream.seek(self._tail_size, os.SEEK_CUR)

            if on_chunk is not None:
                on_chunk()

    def _short_read(self, name: str, expected: int, got: int, pos: int, size: int) -> None:
        if pos >= size:
            logger.warning(
                "Didn't read full %d bytes from %s, got %d (end of file)", expected, name, got
            )
            return
        logger.warning(
            "Didn't read full %d bytes from %s (got %d at offset %d of %d); "
            "file changed during scan, stopping here",
            expected,
            name,
            got,
            pos,
            size,
        )
