"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — grammars generated, or nothing to do
  1   Tool failure — a wrapped generator exited non-zero
  2   Error — bad configuration, unreadable grammar, failed scan or copy, usage error
"""

from __future__ import annotations

from enum import IntEnum

from jjbuild.errors import JJBuildError, ToolFailure


class ExitCode(IntEnum):
    SUCCESS = 0
    TOOL_FAILURE = 1
    ERROR = 2


def exit_code_for(exc: JJBuildError) -> ExitCode:
    """Map a build-stopping error to its CLI exit code."""
    if isinstance(exc, ToolFailure):
        return ExitCode.TOOL_FAILURE
    return ExitCode.ERROR
