"""Error taxonomy — every failure here stops the build.

Nothing below is recovered locally; library code raises, the CLI maps the
class to an exit code (see ``utils/exit_codes.py``).
"""

from __future__ import annotations

from pathlib import Path


class JJBuildError(Exception):
    """Base class for all build-stopping errors."""


class ReadError(JJBuildError):
    """A grammar file is missing or cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read grammar file '{path}': {reason}")
        self.path = path
        self.reason = reason


class InvalidConfiguration(JJBuildError):
    """Configuration rejected before any tool is invoked."""


class ScanError(JJBuildError):
    """The source directory walk itself failed."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"Failed to scan for grammars: {root}: {reason}")
        self.root = root
        self.reason = reason


class RelocationError(JJBuildError):
    """A generated file could not be copied into the output tree."""

    def __init__(self, source: Path, target: Path, reason: str) -> None:
        super().__init__(f"Unable to copy '{source}' to '{target}': {reason}")
        self.source = source
        self.target = target
        self.reason = reason


class ToolFailure(JJBuildError):
    """A wrapped generator returned a non-zero exit code."""

    def __init__(self, tool: str, exit_code: int, grammar_file: Path) -> None:
        super().__init__(f"{tool} reported exit code {exit_code}: {grammar_file}")
        self.tool = tool
        self.exit_code = exit_code
        self.grammar_file = grammar_file
