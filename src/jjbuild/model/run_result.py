"""RunResult — the schema-aligned report of one pipeline invocation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jjbuild import __version__
from jjbuild.model import GrammarState, ScanStatus
from jjbuild.model.grammar_info import GrammarInfo


@dataclass(slots=True)
class RunResult:
    """Assembled run report matching ``run_result.schema.json``.

    Filled in by ``core.runner`` while the pipeline runs; ``states`` is the
    orchestrator's live per-grammar state map.
    """

    # ── run metadata ────────────────────────────────────────────────
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
    tool_version: str = __version__
    pipeline: str = ""
    config: dict = field(default_factory=dict)

    # ── outcome ─────────────────────────────────────────────────────
    status: ScanStatus = ScanStatus.UP_TO_DATE
    grammars: list[GrammarInfo] = field(default_factory=list)
    states: dict[Path, GrammarState] = field(default_factory=dict)

    def state_of(self, info: GrammarInfo) -> GrammarState:
        return self.states.get(info.grammar_file, GrammarState.PENDING)

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Produce the full report JSON matching the schema."""
        by_state: dict[str, int] = {}
        for g in self.grammars:
            key = self.state_of(g).value
            by_state[key] = by_state.get(key, 0) + 1

        return {
            "schema_version": "run_result_v1",
            "run": {
                "run_id": self.run_id,
                "created_at": self.created_at,
                "tool_version": self.tool_version,
                "pipeline": self.pipeline,
                "config": self.config,
            },
            "summary": {
                "status": self.status.value,
                "counts": {
                    "grammars_total": len(self.grammars),
                    "by_state": by_state,
                },
            },
            "grammars": [
                {
                    "grammar_file": g.grammar_file.as_posix(),
                    "package_name": g.package_name,
                    "symbol_name": g.symbol_name,
                    "target_file": g.target_file.as_posix(),
                    "state": self.state_of(g).value,
                }
                for g in self.grammars
            ],
        }
