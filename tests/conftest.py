"""Shared fixtures: grammar writers and fake generator commands."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from jjbuild.core.config import ToolCommands

FIXTURES = Path(__file__).resolve().parent / "fixtures"
FAKE_TOOLS = FIXTURES / "fake_tools"


def grammar_text(parser: str, package: str | None = None) -> str:
    pkg = f"package {package};\n" if package else ""
    return (
        f"PARSER_BEGIN({parser})\n{pkg}\npublic class {parser} {{}}\n"
        f"PARSER_END({parser})\n\nvoid Start() : {{}} {{ <EOF> }}\n"
    )


def write_grammar(root: Path, rel: str, parser: str, package: str | None = None) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(grammar_text(parser, package), encoding="utf-8")
    return path


@pytest.fixture
def fake_tools() -> ToolCommands:
    """Commands that run the fake generators with the current interpreter."""
    return ToolCommands(
        javacc=(sys.executable, str(FAKE_TOOLS / "fake_javacc.py")),
        jjtree=(sys.executable, str(FAKE_TOOLS / "fake_jjtree.py")),
        jtb=(sys.executable, str(FAKE_TOOLS / "fake_jtb.py")),
    )


class RecordingRunner:
    """In-process runner: records every argv and returns scripted exit codes."""

    def __init__(self, exit_codes: dict[str, int] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.exit_codes = exit_codes or {}

    def __call__(self, argv) -> int:
        argv = list(argv)
        self.calls.append(argv)
        for needle, code in self.exit_codes.items():
            if needle in argv[-1]:
                return code
        return 0


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()
