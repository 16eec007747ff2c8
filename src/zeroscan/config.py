# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .domain.errors import ConfigurationError

APP_VERSION = "0.1"

CHUNK_SIZE = 512
BLOCK_SIZE = 4 << 20  # 4 MiB
DEFAULT_PARALLELISM = 10
RATE_INTERVAL = 1.0  # seconds


@dataclass(frozen=True)
class ScanSettings:
    """Everything the pipeline needs for one run. Built by the CLI."""

    root: Path = Path("./")
    parallelism: int = DEFAULT_PARALLELISM
    log_file: Optional[Path] = None
    chunk_size: int = CHUNK_SIZE
    block_size: int = BLOCK_SIZE
    rate_interval: float = RATE_INTERVAL
    max_errors: Optional[int] = None

    def validate(self) -> "ScanSettings":
        if self.parallelism < 1:
            raise ConfigurationError(f"parallelism must be >= 1, got {self.parallelism}")
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk size must be >= 1, got {self.chunk_size}")
        if self.block_size <= self.chunk_size:
            raise ConfigurationError(
                f"block size ({self.block_size}) must be larger than chunk size ({self.chunk_size})"
            )
        if self.block_size % self.chunk_size:
            raise ConfigurationError(
                f"block size ({self.block_size}) must be a multiple of chunk size ({self.chunk_size})"
            )
        if self.rate_interval <= 0:
            raise ConfigurationError("rate interval must be positive")
        if self.max_errors is not None and self.max_errors < 0:
            raise ConfigurationError("--max-errors must be an integer >= 0")
        return self
