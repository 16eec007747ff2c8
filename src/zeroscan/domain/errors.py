# Licensed under the Apache License, Version 2.0


class ZeroScanError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(ZeroScanError):
    """Bad CLI args or unusable config (e.g., block size not a multiple of chunk size)."""


class FilesystemError(ZeroScanError):
    """Unreadable paths, permission issues, files vanishing between walk and open."""


class AlignmentError(ZeroScanError):
    """Read cursor left a chunk boundary mid-scan. Always fatal."""

    def __init__(self, path: str, offset: int, chunk_size: int) -> None:
        super().__init__(
            f"not on a chunk boundary: {path} at offset {offset} (chunk size {chunk_size})"
        )
        self.path = path
        self.offset = offset
        self.chunk_size = chunk_size


class PipelineAborted(ZeroScanError):
    """Raised inside pipeline stages once the shared cancel token is set."""


class ChannelClosed(ZeroScanError):
    """Put on a channel after close()."""


class ErrorBudgetExceeded(ZeroScanError):
    """More files failed to scan than --max-errors allows."""

    def __init__(self, errors: int, limit: int) -> None:
        super().__init__(f"{errors} files failed to scan (limit {limit})")
        self.errors = errors
        self.limit = limit
