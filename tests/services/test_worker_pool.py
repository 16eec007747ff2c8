# tests/services/test_worker_pool.py
import threading
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterator

from zeroscan.adapters.fs.local_fs import LocalFS
from zeroscan.domain.errors import AlignmentError
from zeroscan.domain.models import FileJob
from zeroscan.services.channel import Channel
from zeroscan.services.directory_walker import DirectoryWalker
from zeroscan.services.worker_pool import WorkerPool
from zeroscan.services.zero_block_scanner import ZeroBlockScanner

CHUNK = 4
BLOCK = 16


def _pool(fs=None, size=3, cancel=None) -> WorkerPool:
    return WorkerPool(
        fs or LocalFS(),
        ZeroBlockScanner(CHUNK, BLOCK),
        size,
        cancel=cancel or threading.Event(),
    )


def test_scan_job_counts_zero_blocks(tree: Path):
    f = tree / "zero_two_then_data"
    result = _pool().scan_job(FileJob(path=f, size=f.stat().st_size))
    assert result.ok
    assert result.zero_blocks == 2
    assert result.size == 3 * BLOCK


def test_scan_job_missing_file_becomes_error_result(tmp_path: Path):
    job = FileJob(path=tmp_path / "gone.bin", size=10)
    result = _pool().scan_job(job)
    assert not result.ok
    assert result.path == job.path
    assert result.zero_blocks == 0
    assert "No such file" in result.error


def test_scan_job_emits_progress(tree: Path):
    f = tree / "nested" / "deeper" / "more.bin"
    progress = Channel(10)
    _pool().scan_job(FileJob(path=f, size=f.stat().st_size), progress)
    progress.close()
    assert len(list(progress)) == 3


def test_every_job_gets_exactly_one_result(tree: Path, tmp_path: Path):
    jobs = Channel(2)
    results = Channel(100)
    pool = _pool(size=3)
    pool.start(jobs, results)

    submitted = DirectoryWalker(LocalFS()).feed(tree, jobs)
    jobs.put(FileJob(path=tmp_path / "missing.bin", size=1))
    jobs.close()
    pool.join()
    results.close()

    collected = list(results)
    assert len(collected) == submitted + 1
    assert len({r.path for r in collected}) == len(collected)
    by_name = {r.path.name: r for r in collected}
    assert by_name["zero_one_block.bin"].zero_blocks == 1
    assert by_name["leading_zero.bin"].zero_blocks == 0
    assert not by_name["missing.bin"].ok
    assert pool.fatal is None


class MisalignedFS(LocalFS):
    """Hands the scanner a stream whose cursor is off a chunk boundary."""

    def walk(self, root: Path) -> Iterator[Path]:
        yield root

    def open_binary(self, path: Path) -> BinaryIO:
        stream = BytesIO(bytes(4 * BLOCK))
        stream.seek(1)
        return stream


def test_alignment_fault_aborts_pool(tmp_path: Path):
    cancel = threading.Event()
    jobs = Channel(2, cancel)
    results = Channel(2, cancel)
    pool = _pool(MisalignedFS(), size=2, cancel=cancel)
    pool.start(jobs, results)

    jobs.put(FileJob(path=tmp_path / "x.bin", size=4 * BLOCK))
    pool.join()

    assert cancel.is_set()
    assert isinstance(pool.fatal, AlignmentError)
