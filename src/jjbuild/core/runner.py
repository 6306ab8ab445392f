"""Runner — scans for stale grammars, drives each through its pipeline, builds RunResult."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterable

from jjbuild.core.config import BuildConfig
from jjbuild.core.pipeline import GrammarJob, Pipeline, shape_for
from jjbuild.core.relocate import copy_grammar_output
from jjbuild.core.scanner import StalenessScanner
from jjbuild.errors import RelocationError, ToolFailure
from jjbuild.model import GrammarState, ScanStatus
from jjbuild.model.grammar_info import GrammarInfo
from jjbuild.model.run_result import RunResult
from jjbuild.model.scan_result import ScanResult
from jjbuild.tools.base import Runner

_logger = logging.getLogger(__name__)


def _is_within(path: Path, roots: Iterable[Path]) -> bool:
    resolved = path.resolve()
    return any(resolved.is_relative_to(Path(r).resolve()) for r in roots)


class Orchestrator:
    """Processes grammars strictly one at a time through a :class:`Pipeline`.

    The first ``ToolFailure`` or ``RelocationError`` marks that grammar
    ``FAILED`` and propagates; grammars after it stay ``PENDING``, grammars
    before it keep their output.
    ``states`` reflects progress even after a failure.
    """

    def __init__(
        self,
        pipeline: Pipeline,
        config: BuildConfig,
        *,
        output_directory: Path,
        scratch_directory: Path,
        interim_directory: Path | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.config = config
        self.output_directory = Path(output_directory).absolute()
        self.interim_directory = (
            Path(interim_directory).absolute() if interim_directory else self.output_directory
        )
        self.scratch_directory = Path(scratch_directory)
        self.runner = runner
        self.states: dict[Path, GrammarState] = {}

    def _set(self, info: GrammarInfo, state: GrammarState) -> None:
        _logger.debug("%s: %s", info.grammar_file.name, state.value)
        self.states[info.grammar_file] = state

    @property
    def source_roots(self) -> list[Path]:
        """Where an already existing counterpart of a generated file may live."""
        roots = [*self.config.compile_source_roots, self.output_directory]
        if self.interim_directory != self.output_directory:
            roots.append(self.interim_directory)
        return roots

    def process(self, grammars: Iterable[GrammarInfo]) -> dict[Path, GrammarState]:
        grammars = list(grammars)
        for info in grammars:
            self._set(info, GrammarState.PENDING)
        for index, info in enumerate(grammars):
            self._process_one(index, info)
        return self.states

    def _process_one(self, index: int, info: GrammarInfo) -> None:
        shape = shape_for(self.pipeline, info)
        job = GrammarJob(
            info=info,
            config=self.config,
            scratch=self.scratch_directory / f"{index:03d}-{info.grammar_file.stem}",
            output_root=self.output_directory,
            interim_root=self.interim_directory,
            runner=self.runner,
        )
        _logger.info("Processing grammar: %s", info)

        for stage in shape.stages:
            self._set(info, stage.running)
            tool = stage.make_tool(job, stage.input_file(job), stage.output_directory(job))
            try:
                tool.run()
            except ToolFailure:
                self._set(info, GrammarState.FAILED)
                raise
            if tool.output_file is not None:
                job.last_output = tool.output_file
            self._set(info, stage.done)

        self._set(info, GrammarState.RELOCATING)
        try:
            for relocation in shape.relocations:
                copy_grammar_output(
                    relocation.target_root(job),
                    relocation.package(job),
                    relocation.source(job),
                    relocation.update_pattern(job),
                    suffix=relocation.extension or self.config.suffix,
                    source_roots=self.source_roots,
                )
            # Hand-written files next to the grammar, unless they are compiled in place.
            if shape.copies_custom_sources and not _is_within(
                info.grammar_file, self.config.compile_source_roots
            ):
                copy_grammar_output(
                    job.output_root,
                    info.package_name,
                    info.grammar_file.parent,
                    "*",
                    suffix=self.config.suffix,
                    source_roots=self.source_roots,
                )
        except RelocationError:
            self._set(info, GrammarState.FAILED)
            raise
        shutil.rmtree(job.scratch, ignore_errors=True)
        self._set(info, GrammarState.DONE)


def scan(
    config: BuildConfig,
    pipeline: Pipeline,
    *,
    output_directory: Path | None = None,
) -> ScanResult:
    """Scan *config*'s source directory with *pipeline*'s defaults filled in.

    Staleness is judged against *output_directory*, else the configured
    one; with neither, every matching grammar is reported.
    """
    scanner = StalenessScanner(
        source_directory=config.source_directory or pipeline.default_source_directory,
        output_directory=output_directory or config.output_directory,
        includes=config.includes or pipeline.default_includes,
        excludes=config.excludes,
        stale_millis=config.stale_millis,
        package_override=config.package_override,
        suffix=config.suffix,
        encoding=config.grammar_encoding,
        target_mapper=pipeline.stale_target,
    )
    return scanner.scan()


def run_pipeline(
    config: BuildConfig,
    pipeline: Pipeline,
    *,
    runner: Runner | None = None,
    _run_id: str | None = None,
    _created_at: str | None = None,
) -> RunResult:
    """Scan, regenerate every stale grammar, and assemble a ``RunResult``.

    Errors propagate unchanged.  The per-invocation scratch directory is
    removed after a successful run and kept after a failure.
    """
    source = config.source_directory or pipeline.default_source_directory
    output = config.output_directory or pipeline.default_output_directory
    result = RunResult(
        pipeline=pipeline.name,
        config={
            "source_directory": str(source),
            "output_directory": str(output),
            "interim_directory": str(config.interim_directory or output),
            "includes": list(config.includes or pipeline.default_includes),
            "excludes": list(config.excludes),
            "stale_millis": config.stale_millis,
        },
    )
    if _run_id is not None:
        result.run_id = _run_id
    if _created_at is not None:
        result.created_at = _created_at

    # ── 1. scan ─────────────────────────────────────────────────────
    grammars = scan(config, pipeline, output_directory=output)
    if not grammars.source_root_exists:
        _logger.info("Skipping non-existing source directory: %s", source)
        result.status = ScanStatus.MISSING_SOURCE_ROOT
        return result
    if not grammars:
        _logger.info("Skipping - all parsers are up to date")
        result.status = ScanStatus.UP_TO_DATE
        return result

    # ── 2. generate, one grammar at a time ──────────────────────────
    build_dir = Path(config.build_directory)
    build_dir.mkdir(parents=True, exist_ok=True)
    scratch = Path(tempfile.mkdtemp(prefix="jjbuild-", dir=build_dir))
    orchestrator = Orchestrator(
        pipeline,
        config,
        output_directory=output,
        interim_directory=config.interim_directory,
        scratch_directory=scratch,
        runner=runner,
    )
    result.grammars = list(grammars)
    result.states = orchestrator.states
    orchestrator.process(grammars)
    shutil.rmtree(scratch, ignore_errors=True)

    n = len(grammars)
    _logger.info("Processed %d grammar%s", n, "" if n == 1 else "s")
    result.status = ScanStatus.PROCESSED
    return result
