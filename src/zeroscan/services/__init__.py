from .channel import Channel
from .directory_walker import DirectoryWalker
from .pipeline import PipelinePhase, ScanPipeline
from .rate_monitor import RateMonitor
from .result_logger import ResultLogger
from .worker_pool import WorkerPool
from .zero_block_scanner import ZeroBlockScanner, zero_reference


__all__ = [
    'Channel',
    'DirectoryWalker',
    'PipelinePhase',
    'ScanPipeline',
    'RateMonitor',
    'ResultLogger',
    'WorkerPool',
    'ZeroBlockScanner',
    'zero_reference',
]
