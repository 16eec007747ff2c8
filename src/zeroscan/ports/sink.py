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


class ResultSinkPort(ABC):
    """Destination for formatted result lines (console, log file, ...)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label used in diagnostics."""
        raise NotImplementedError

    @abstractmethod
    def write(self, line: str) -> None:
        """Emit one already-terminated line."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any held resources. Default: nothing to release."""
