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

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO, Union

from ...domain.errors import ConfigurationError
from ...ports.sink import ResultSinkPort

logger = logging.getLogger(__name__)


class AppendFileSink(ResultSinkPort):
    """
    Persistent result log. Opened in append mode, created if absent.

    Only the result logger thread writes here, so there is no locking.
    A failed write is reported once; after that the sink goes quiet and
    the scan carries on with console output only.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        try:
            self._fh: Optional[TextIO] = open(self._path, "a", encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"cannot open log file {self._path}: {e}") from e
        self._failed = False

    @property
    def name(self) -> str:
        return f"file:{self._path}"

    @property
    def failed(self) -> bool:
        return self._failed

    def write(self, line: str) -> None:
        if self._failed or self._fh is None:
            return
        try:
            self._fh.write(line)
            self._fh.flush()
        except OSError as e:
            self._failed = True
            logger.error(
                "Writing to log file %s failed, further results go to console only: %s",
                self._path,
                e,
            )

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.close()
        except OSError as e:
            logger.error("Closing log file %s failed: %s", self._path, e)
        finally:
            self._fh = None

    def __enter__(self) -> "AppendFileSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
