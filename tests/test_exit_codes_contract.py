"""Exit code contract tests — enforce stable CLI exit semantics.

Code  Meaning
----  -------
  0   Success — grammars generated, or nothing to do
  1   Tool failure — a wrapped generator exited non-zero
  2   Error — bad configuration, unreadable grammar, failed scan or copy, usage error
"""

from __future__ import annotations

from pathlib import Path

import pytest

from jjbuild.errors import (
    InvalidConfiguration,
    ReadError,
    RelocationError,
    ScanError,
    ToolFailure,
)
from jjbuild.utils.exit_codes import ExitCode, exit_code_for


class TestExitCodeValues:
    def test_values_are_frozen(self) -> None:
        assert [int(c) for c in ExitCode] == [0, 1, 2]


class TestExitCodeMapping:
    def test_tool_failure(self) -> None:
        assert exit_code_for(ToolFailure("javacc", 3, Path("G.jj"))) is ExitCode.TOOL_FAILURE

    @pytest.mark.parametrize(
        "exc",
        [
            ReadError(Path("G.jj"), "gone"),
            InvalidConfiguration("bad"),
            ScanError(Path("src"), "denied"),
            RelocationError(Path("P.java"), Path("out/P.java"), "Not a directory"),
        ],
    )
    def test_everything_else_is_error(self, exc: Exception) -> None:
        assert exit_code_for(exc) is ExitCode.ERROR


def test_schemas_carry_ids() -> None:
    from jjbuild.contracts.load import load_schema

    assert load_schema("run_result.schema.json")["$id"] == "jjbuild/run_result.schema.json"
    assert load_schema("config.schema.json")["$id"] == "jjbuild/config.schema.json"
