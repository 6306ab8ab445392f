"""JavaCC facade — the parser generator."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jjbuild.model.options import PipelineOptions, render_value
from jjbuild.tools.base import Runner, ToolFacade

DEFAULT_COMMAND: tuple[str, ...] = ("javacc",)


class JavaCC(ToolFacade):
    """Runs ``javacc`` on one grammar.

    Argument vector: ``-OPTION=value`` for each set option,
    ``-OUTPUT_DIRECTORY:<dir>``, then the input grammar path.
    """

    name = "javacc"

    def __init__(
        self,
        input_file: Path,
        output_directory: Path,
        options: PipelineOptions | None = None,
        *,
        command: Sequence[str] = DEFAULT_COMMAND,
        runner: Runner | None = None,
    ) -> None:
        super().__init__(input_file, output_directory, command=command, runner=runner)
        self.options = options or PipelineOptions()

    def arguments(self) -> list[str]:
        args = [f"-{flag}={render_value(v)}" for flag, v in self.options.set_options()]
        args.append(f"-OUTPUT_DIRECTORY:{self.output_directory}")
        args.append(str(self.input_file))
        return args
