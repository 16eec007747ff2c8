from .errors import (
    AlignmentError,
    ChannelClosed,
    ConfigurationError,
    ErrorBudgetExceeded,
    FilesystemError,
    PipelineAborted,
    ZeroScanError,
)
from .models import FileJob, ScanResult, ScanSummary, block_label

__all__ = [
    "AlignmentError",
    "ChannelClosed",
    "ConfigurationError",
    "ErrorBudgetExceeded",
    "FilesystemError",
    "PipelineAborted",
    "ZeroScanError",
    "FileJob",
    "ScanResult",
    "ScanSummary",
    "block_label",
]
