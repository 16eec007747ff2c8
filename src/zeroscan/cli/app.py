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
from typing import List, Optional

import typer

from ..adapters.fs.local_fs import LocalFS
from ..adapters.sink.console_sink import ConsoleSink
from ..adapters.sink.file_sink import AppendFileSink
from ..config import (
    APP_VERSION,
    BLOCK_SIZE,
    CHUNK_SIZE,
    DEFAULT_PARALLELISM,
    ScanSettings,
)
from ..domain.errors import ConfigurationError, ZeroScanError
from ..ports.sink import ResultSinkPort
from ..services import ScanPipeline

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="zeroscan - find files containing blocks of binary zeroes")

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"Version: {APP_VERSION}")
        raise typer.Exit()


def _wire_sinks(log_file: Optional[Path]) -> List[ResultSinkPort]:
    """Console always; append-mode log file when -w is given."""
    sinks: List[ResultSinkPort] = [ConsoleSink()]
    if log_file is not None:
        sinks.append(AppendFileSink(log_file))
    return sinks


@app.command()
def scan(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Print the version number and exit.",
    ),
    path: Path = typer.Option(
        Path("./"),
        "--path",
        "-p",
        exists=True,
        envvar="ZEROSCAN_PATH",
        help="Path to walk",
    ),
    parallel: int = typer.Option(
        DEFAULT_PARALLELISM,
        "--parallel",
        "-parallel",
        envvar="ZEROSCAN_PARALLEL",
        help="Number of parallel reads to do",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-w",
        envvar="ZEROSCAN_LOG_FILE",
        dir_okay=False,
        help="Logfile to append results to (console only when omitted)",
    ),
    max_errors: Optional[int] = typer.Option(
        None,
        "--max-errors",
        help="Abort once more than N files fail to open. Omit to never abort.",
    ),
    chunk_size: int = typer.Option(
        CHUNK_SIZE, "--chunk-size", help="Probe size in bytes."
    ),
    block_size: int = typer.Option(
        BLOCK_SIZE,
        "--block-size",
        help="Zero block size in bytes; must be a multiple of --chunk-size.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress the final summary line.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Walk a directory tree and report files containing whole blocks of zero bytes.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        settings = ScanSettings(
            root=path,
            parallelism=parallel,
            log_file=log_file,
            chunk_size=chunk_size,
            block_size=block_size,
            max_errors=max_errors,
        ).validate()
        sinks = _wire_sinks(log_file)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    try:
        summary = ScanPipeline(settings, LocalFS(), sinks).run()
    except (ZeroScanError, OSError) as e:
        typer.echo(f"Fatal: {e}", err=True)
        raise typer.Exit(code=2)
    finally:
        for sink in sinks:
            sink.close()

    if not quiet:
        typer.echo(
            f"Scanned {path}; {summary.files} files, "
            f"{summary.files_with_zero_blocks} with zero blocks "
            f"({summary.zero_blocks} blocks), {summary.errors} errors",
            err=True,
        )
