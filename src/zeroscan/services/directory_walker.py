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
from pathlib import Path
from typing import Iterator

from ..domain.models import FileJob
from ..ports.filesystem import FilesystemPort
from .channel import Channel

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """
    Turns a directory tree into FileJobs, one per regular file.

    Directories and special files (fifos, sockets, devices) never become
    jobs. Entries that cannot be stat'ed are reported and skipped.
    """

    def __init__(self, fs: FilesystemPort) -> None:
        self._fs = fs

    def jobs(self, root: Path) -> Iterator[FileJob]:
        for path in self._fs.walk(Path(root)):
            p = Path(path)
            try:
                meta = self._fs.stat(p)
            except OSError as e:
                logger.warning("Failed to walk: %s (%s)", p, e)
                continue
            if not meta.get("is_regular", True):
                logger.debug("Skipping non-regular file %s", p)
                continue
            yield FileJob(path=p, size=int(meta["size"]), mtime_ns=int(meta.get("mtime_ns", 0)))

    def feed(self, root: Path, jobs: Channel[FileJob]) -> int:
        """
        Push every job onto `jobs`, blocking while the channel is full.

        Returns:
            Number of jobs submitted.
        """
        submitted = 0
        for job in self.jobs(root):
            jobs.put(job)
            submitted += 1
        logger.debug("Walk of %s finished, %d jobs submitted", root, submitted)
        return submitted
