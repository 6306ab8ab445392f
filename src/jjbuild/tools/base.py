"""Tool facade — turn typed options into an argument vector and run the tool."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from jjbuild.errors import ToolFailure

_logger = logging.getLogger(__name__)

# Signature of anything that can execute a full argv and return its exit code.
Runner = Callable[[Sequence[str]], int]

# Exit code reported when the tool executable cannot be launched at all.
EXIT_NOT_LAUNCHED = 127


def subprocess_runner(argv: Sequence[str]) -> int:
    """Run *argv* as a child process, blocking until it exits."""
    proc = subprocess.run(list(argv), capture_output=True, text=True)
    level = logging.DEBUG if proc.returncode == 0 else logging.ERROR
    for stream in (proc.stdout, proc.stderr):
        for line in stream.splitlines():
            _logger.log(level, "  %s", line)
    return proc.returncode


class ToolFacade:
    """Common run/interpret logic for the code generators.

    Subclasses implement :meth:`arguments`; the full command is
    ``command + arguments()``.  ``runner`` defaults to a blocking subprocess
    call; tests inject an in-process callable instead.
    """

    name: str = "tool"

    def __init__(
        self,
        input_file: Path,
        output_directory: Path,
        *,
        command: Sequence[str],
        runner: Runner | None = None,
    ) -> None:
        self.input_file = Path(input_file).absolute()
        self.output_directory = Path(output_directory).absolute()
        self.command = tuple(command)
        self._runner = runner or subprocess_runner

    def arguments(self) -> list[str]:
        raise NotImplementedError

    @property
    def output_file(self) -> Path | None:
        """The file the next stage consumes, if this tool produces one."""
        return None

    def argv(self) -> list[str]:
        return [*self.command, *self.arguments()]

    def run(self) -> None:
        """Create the output directory, invoke the tool, check its exit code.

        Raises
        ------
        ToolFailure
            On non-zero exit, or exit 127 if the tool could not be started.
        """
        self.output_directory.mkdir(parents=True, exist_ok=True)
        argv = self.argv()
        _logger.debug("Running %s: %s", self.name, argv)
        try:
            exit_code = self._runner(argv)
        except OSError as exc:
            _logger.error("Unable to launch %s: %s", self.name, exc)
            raise ToolFailure(self.name, EXIT_NOT_LAUNCHED, self.input_file) from exc
        if exit_code != 0:
            raise ToolFailure(self.name, exit_code, self.input_file)

    def __str__(self) -> str:
        return " ".join(self.argv())
