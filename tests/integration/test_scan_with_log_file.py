from pathlib import Path

from zeroscan.adapters.fs.local_fs import LocalFS
from zeroscan.adapters.sink.file_sink import AppendFileSink
from zeroscan.config import ScanSettings
from zeroscan.services import ScanPipeline


def write_file(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


def test_log_file_matches_console_and_appends(tmp_path: Path, list_sink):
    # Arrange: one file with a real 4 MiB zero block, one ordinary file
    root = tmp_path / "data"
    corrupt = root / "disk" / "image.raw"
    ok = root / "notes.txt"
    block = 4 << 20
    write_file(corrupt, b"header" + bytes(block - 6) + bytes(block) + b"trailer")
    write_file(ok, b"something else\n")

    log = tmp_path / "zeroscan.log"
    settings = ScanSettings(root=root, parallelism=4, log_file=log)

    # Act: two runs appending to the same log
    for _ in range(2):
        with AppendFileSink(log) as sink:
            ScanPipeline(settings, LocalFS(), [list_sink, sink]).run()

    # Assert: console and file see the same lines; second run appended
    lines = log.read_text(encoding="utf-8").splitlines(keepends=True)
    assert sorted(lines) == sorted(list_sink.lines)
    assert len(lines) == 4
    size = corrupt.stat().st_size
    assert lines.count(
        f"{corrupt},{size},{size},file contained 1 4096.0k blocks of binary zeroes\n"
    ) == 2
    assert lines.count(f"{ok},15,15,Read whole file\n") == 2
