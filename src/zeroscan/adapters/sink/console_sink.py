# Licensed under the Apache License, Version 2.0
import typer

from ...ports.sink import ResultSinkPort


class ConsoleSink(ResultSinkPort):
    @property
    def name(self) -> str:
        return "console"

    def write(self, line: str) -> None:
        typer.echo(line, nl=False)
