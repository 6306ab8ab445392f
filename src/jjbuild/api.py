"""
jjbuild.api
===========

Programmatic entrypoints for driving grammar generation from other tools.

Goals:
  - No argparse / CLI dependencies
  - Deterministic mode support (ci_mode=True)
  - Errors propagate unchanged; callers decide how to report them

Usage::

    from jjbuild.api import load_config, run_pipeline, scan_grammars

    config = load_config("jjbuild.yaml")
    stale = scan_grammars(config, "jjtree-javacc")
    result, report = run_pipeline(config, "jjtree-javacc", ci_mode=True)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jjbuild.contracts.load import validate_instance
from jjbuild.core import runner as _runner
from jjbuild.core.config import BuildConfig
from jjbuild.core.pipeline import get_pipeline
from jjbuild.model.run_result import RunResult
from jjbuild.model.scan_result import ScanResult
from jjbuild.tools.base import Runner

__all__ = ["load_config", "run_pipeline", "scan_grammars", "validate_instance"]

# Fixed identifiers for deterministic mode (matches CLI contract).
_DETERMINISTIC_TIMESTAMP = "2000-01-01T00:00:00+00:00"
_DETERMINISTIC_RUN_ID = "00000000-0000-0000-0000-000000000000"


def load_config(path: str | Path | None = None, **overrides: Any) -> BuildConfig:
    """Load a ``BuildConfig``.

    Parameters
    ----------
    path:
        YAML config file.  ``None`` discovers ``jjbuild.yaml`` in the
        current directory and falls back to defaults.
    overrides:
        Field values that replace what the file says; ``None`` values are
        ignored so CLI flags can be passed straight through.
    """
    if path is None:
        config = BuildConfig.discover(Path.cwd())
    else:
        config = BuildConfig.load(Path(path))
    return config.with_overrides(**overrides)


def scan_grammars(config: BuildConfig, pipeline: str = "javacc") -> ScanResult:
    """Return the grammars *pipeline* would regenerate, without running anything.

    Without ``config.output_directory`` no staleness check is made and every
    matching grammar is returned.
    """
    return _runner.scan(config, get_pipeline(pipeline))


def run_pipeline(
    config: BuildConfig,
    pipeline: str = "javacc",
    *,
    ci_mode: bool = False,
    runner: Optional[Runner] = None,
) -> tuple[RunResult, dict[str, Any]]:
    """Run one pipeline end to end.

    Returns
    -------
    ``(RunResult, report_dict)``
        The dataclass and the schema-validated JSON dict.

    Raises
    ------
    ReadError, InvalidConfiguration, ScanError, ToolFailure
        Unchanged from the layer that detected them.
    """
    kwargs: dict[str, Any] = {"runner": runner}
    if ci_mode:
        kwargs["_run_id"] = _DETERMINISTIC_RUN_ID
        kwargs["_created_at"] = _DETERMINISTIC_TIMESTAMP
    result = _runner.run_pipeline(config, get_pipeline(pipeline), **kwargs)
    report = result.to_dict()
    validate_instance(report, "run_result.schema.json")
    return result, report
