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

import logging
import os
import stat as stat_mod
from pathlib import Path
from typing import BinaryIO, Iterator

from ...ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)


class LocalFS(FilesystemPort):
    """Local filesystem adapter. Symlink and permission semantics are whatever os.walk gives us."""

    def walk(self, root: Path) -> Iterator[Path]:
        root = Path(root)
        if root.is_file():
            yield root
            return
        for dirpath, _dirnames, filenames in os.walk(root, onerror=self._walk_error):
            d = Path(dirpath)
            for name in filenames:
                yield d / name

    @staticmethod
    def _walk_error(err: OSError) -> None:
        logger.warning("Failed to walk: %s (%s)", err.filename, err.strerror or err)

    def stat(self, path: Path) -> dict:
        st = path.stat()
        return {
            "path": str(path),
            "size": st.st_size,
            "mtime_ns": getattr(st, "st_mtime_ns", int(st.st_mtime * 1e9)),
            "is_regular": stat_mod.S_ISREG(st.st_mode),
        }

    def open_binary(self, path: Path) -> BinaryIO:
        return open(path, "rb")
