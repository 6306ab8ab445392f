"""CLI entry-point for jjbuild.

Usage:
    python -m jjbuild scan --source <dir> [--output <dir>] [--include PAT ...] [--json]
    python -m jjbuild run <pipeline> [--config FILE] [--source DIR] [--output DIR]
                          [--interim DIR] [--build-dir DIR] [--report FILE] [--ci]
    python -m jjbuild validate <config.yaml>
    python -m jjbuild pipelines
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from jjbuild import __version__
from jjbuild.api import load_config as _api_load_config
from jjbuild.api import run_pipeline as _api_run_pipeline
from jjbuild.api import scan_grammars as _api_scan_grammars
from jjbuild.core.config import BuildConfig
from jjbuild.core.pipeline import PIPELINES
from jjbuild.errors import JJBuildError
from jjbuild.utils.exit_codes import ExitCode, exit_code_for
from jjbuild.utils.json_norm import stable_json_dumps, write_json

_logger = logging.getLogger("jjbuild")


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jjbuild",
        description="Regenerate stale JavaCC / JJTree / JTB grammars.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-v", "--verbose", action="count", default=0, help="Log every state transition."
    )
    p.add_argument(
        "-q", "--quiet", action="store_true", default=False, help="Only log warnings and errors."
    )
    sub = p.add_subparsers(dest="command")

    # ── scan subcommand ─────────────────────────────────────────────
    scan_p = sub.add_parser("scan", help="List grammars whose generated output is stale.")
    scan_p.add_argument("--source", type=Path, required=True, help="Grammar source root.")
    scan_p.add_argument(
        "--output", type=Path, default=None,
        help="Generated sources root; without it every matching grammar is listed.",
    )
    scan_p.add_argument(
        "--include", dest="includes", action="append", default=None, metavar="PAT",
        help="Ant-style include pattern (repeatable).",
    )
    scan_p.add_argument(
        "--exclude", dest="excludes", action="append", default=None, metavar="PAT",
        help="Ant-style exclude pattern (repeatable).",
    )
    scan_p.add_argument("--stale-millis", dest="stale_millis", type=int, default=None)
    scan_p.add_argument(
        "--pipeline", default="javacc", choices=sorted(PIPELINES),
        help="Pipeline whose default includes apply.",
    )
    scan_p.add_argument(
        "--json", dest="json_out", action="store_true", default=False,
        help="Print the grammar list as JSON.",
    )

    # ── run subcommand ──────────────────────────────────────────────
    run_p = sub.add_parser("run", help="Run one generator pipeline.")
    run_p.add_argument("pipeline", choices=sorted(PIPELINES))
    run_p.add_argument("--config", type=Path, default=None, help="YAML config file.")
    run_p.add_argument("--source", type=Path, default=None)
    run_p.add_argument("--output", type=Path, default=None)
    run_p.add_argument("--interim", type=Path, default=None)
    run_p.add_argument("--build-dir", dest="build_dir", type=Path, default=None)
    run_p.add_argument("--stale-millis", dest="stale_millis", type=int, default=None)
    run_p.add_argument(
        "--report", type=Path, default=None, help="Write the RunResult JSON to this file."
    )
    run_p.add_argument(
        "--ci", "--deterministic", dest="ci_mode", action="store_true", default=False,
        help="Enable deterministic output (stable IDs and timestamps).",
    )

    # ── validate subcommand ─────────────────────────────────────────
    val_p = sub.add_parser("validate", help="Validate a jjbuild.yaml config file.")
    val_p.add_argument("config", type=Path)

    # ── pipelines subcommand ────────────────────────────────────────
    sub.add_parser("pipelines", help="List the registered pipelines.")
    return p


def _handle_scan(args: argparse.Namespace) -> int:
    config = BuildConfig(
        source_directory=args.source,
        output_directory=args.output,
        includes=tuple(args.includes or ()),
        excludes=tuple(args.excludes or ()),
        stale_millis=args.stale_millis or 0,
    )
    result = _api_scan_grammars(config, args.pipeline)
    if args.json_out:
        print(stable_json_dumps({
            "source_root": result.source_root,
            "source_root_exists": result.source_root_exists,
            "grammars": [
                {
                    "grammar_file": g.grammar_file,
                    "package_name": g.package_name,
                    "symbol_name": g.symbol_name,
                    "target_file": g.target_file,
                }
                for g in result
            ],
        }), end="")
        return ExitCode.SUCCESS
    if not result.source_root_exists:
        _logger.info("Skipping non-existing source directory: %s", args.source)
        return ExitCode.SUCCESS
    for info in result:
        print(info)
    return ExitCode.SUCCESS


def _handle_run(args: argparse.Namespace) -> int:
    config = _api_load_config(
        args.config,
        source_directory=args.source,
        output_directory=args.output,
        interim_directory=args.interim,
        build_directory=args.build_dir,
        stale_millis=args.stale_millis,
    )
    _, report = _api_run_pipeline(config, args.pipeline, ci_mode=args.ci_mode)
    if args.report is not None:
        write_json(args.report, report)
        _logger.info("Wrote report: %s", args.report)
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    BuildConfig.load(args.config)
    print("OK")
    return ExitCode.SUCCESS


def _handle_pipelines(args: argparse.Namespace) -> int:
    for name in sorted(PIPELINES):
        pipeline = PIPELINES[name]
        stages = " -> ".join(s.name for s in pipeline.stages)
        print(f"{name}\t{pipeline.default_source_directory.as_posix()}\t{stages}")
    return ExitCode.SUCCESS


_HANDLERS = {
    "scan": _handle_scan,
    "run": _handle_run,
    "validate": _handle_validate,
    "pipelines": _handle_pipelines,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (0 = ok, 1 = tool failure, 2 = error)."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help / --version exit 0; usage errors exit 2.
        return int(exc.code or 0)
    if args.command is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR

    _configure_logging(args.verbose, args.quiet)
    try:
        return int(_HANDLERS[args.command](args))
    except JJBuildError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return int(exit_code_for(exc))


if __name__ == "__main__":
    raise SystemExit(main())
