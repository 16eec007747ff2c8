from pathlib import Path
from typing import List

import pytest

from zeroscan.ports.sink import ResultSinkPort

# Small sizes keep zero-block fixtures tiny: one block = 4 chunks of 4 bytes.
CHUNK = 4
BLOCK = 16


class ListSink(ResultSinkPort):
    """Collects result lines in memory."""

    def __init__(self) -> None:
        self.lines: List[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "list"

    def write(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def list_sink() -> ListSink:
    return ListSink()


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """
    data/
      zero_one_block.bin   one all-zero block
      zero_two_then_data   two zero blocks, then a data block
      leading_zero.bin     zero chunk + data tail, twice
      text.txt             plain text (size not a multiple of CHUNK)
      empty.bin            size 0
      nested/deeper/more.bin  data
    """
    root = tmp_path / "data"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "zero_one_block.bin").write_bytes(bytes(BLOCK))
    (root / "zero_two_then_data").write_bytes(bytes(2 * BLOCK) + b"\xff" * BLOCK)
    (root / "leading_zero.bin").write_bytes((bytes(CHUNK) + b"\x01" * (BLOCK - CHUNK)) * 2)
    (root / "text.txt").write_text("hello world\n")
    (root / "empty.bin").write_bytes(b"")
    (root / "nested" / "deeper" / "more.bin").write_bytes(b"\x07" * (3 * BLOCK))
    return root
