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

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class FileJob:
    """One regular file discovered by the walker. Consumed by exactly one worker."""

    path: Path
    size: int
    mtime_ns: int = 0


@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of scanning one FileJob.

    `error` is None for a completed scan. Failed scans (open/stat errors)
    still produce a result so every job is accounted for downstream.
    """

    path: Path
    size: int
    zero_blocks: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def status(self, block_size: int) -> str:
        if self.error is not None:
            return f"scan failed: {self.error}"
        if self.zero_blocks == 0:
            return "Read whole file"
        return (
            f"file contained {self.zero_blocks} {block_label(block_size)} "
            "blocks of binary zeroes"
        )

    def to_log_line(self, block_size: int) -> str:
        # size is written twice; downstream tooling expects four columns
        return f"{self.path},{self.size},{self.size},{self.status(block_size)}\n"


def block_label(block_size: int) -> str:
    """
    Render a block size for the status text.

    Whole KiB multiples keep the legacy form (4 MiB -> '4096.0k'), anything
    else is spelled out in bytes (16 -> '16-byte').
    """
    if block_size % 1024 == 0:
        return f"{block_size / 1024:.1f}k"
    return f"{block_size}-byte"


@dataclass
class ScanSummary:
    files: int = 0
    files_with_zero_blocks: int = 0
    zero_blocks: int = 0
    errors: int = 0
    chunks: int = 0

    def record(self, result: ScanResult) -> None:
        self.files += 1
        if not result.ok:
            self.errors += 1
            return
        if result.zero_blocks:
            self.files_with_zero_blocks += 1
            self.zero_blocks += result.zero_blocks
