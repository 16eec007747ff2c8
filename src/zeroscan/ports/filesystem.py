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

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Iterator


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def walk(self, root: Path) -> Iterator[Path]:
        """
        Recursively yield file paths under the given root.
        Entry errors are reported and skipped; they never end the walk.
        """
        raise NotImplementedError

    @abstractmethod
    def stat(self, path: Path) -> dict:
        """Return metadata (path, size, mtime_ns, is_regular) for a given path."""
        raise NotImplementedError

    @abstractmethod
    def open_binary(self, path: Path) -> BinaryIO:
        """Open a file read-only for seekable binary reads."""
        raise NotImplementedError
