"""Staleness scanner — decide which grammars need regeneration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from jjbuild.core.discover import DiscoverConfig, iter_grammar_files
from jjbuild.model import Suffix
from jjbuild.model.grammar_info import GrammarInfo
from jjbuild.model.scan_result import ScanResult

_logger = logging.getLogger(__name__)

DEFAULT_INCLUDES: tuple[str, ...] = ("**/*.jj", "**/*.JJ")


@dataclass(frozen=True)
class StalenessScanner:
    """Map grammar sources to their expected outputs and keep the stale ones.

    Without an ``output_directory`` every matching grammar is reported,
    which is what documentation-style consumers want.  ``target_mapper``
    replaces the default target (the parser file) for preprocessor-only runs.
    """

    source_directory: Path
    output_directory: Path | None = None
    includes: tuple[str, ...] = DEFAULT_INCLUDES
    excludes: tuple[str, ...] = ()
    stale_millis: int = 0
    package_override: str | None = None
    suffix: Suffix = Suffix.JAVA
    encoding: str | None = None
    target_mapper: Callable[[GrammarInfo], Path] | None = None

    def scan(self) -> ScanResult:
        """Run one scan pass.

        Returns ``ScanResult.missing(...)`` when the source directory does not
        exist; raises ``ScanError`` if the walk fails and ``ReadError`` if a
        matched grammar cannot be read.
        """
        source = Path(self.source_directory)
        if not source.is_dir():
            return ScanResult.missing(source)

        _logger.debug("Scanning for grammars: %s", source)
        cfg = DiscoverConfig(
            root=source,
            includes=tuple(self.includes) or DEFAULT_INCLUDES,
            excludes=tuple(self.excludes),
        )
        result = ScanResult(source)
        for path in iter_grammar_files(cfg):
            info = GrammarInfo.from_file(
                path,
                source_directory=source,
                package_override=self.package_override,
                suffix=self.suffix,
                encoding=self.encoding,
            )
            if self.is_stale(info):
                result.add(info)
            else:
                _logger.debug("Up to date: %s", info)
        _logger.debug("Found grammars: %s", [str(g) for g in result])
        return result

    def targets_for(self, info: GrammarInfo) -> list[Path]:
        """Expected generated artifacts of *info* under the output directory."""
        if self.output_directory is None:
            return []
        rel = self.target_mapper(info) if self.target_mapper else info.target_file
        return [Path(self.output_directory) / rel]

    def is_stale(self, info: GrammarInfo) -> bool:
        """True if any target is missing or older than the grammar by more than the granularity."""
        if self.output_directory is None:
            return True
        source_ns = info.grammar_file.stat().st_mtime_ns
        granularity_ns = self.stale_millis * 1_000_000
        for target in self.targets_for(info):
            try:
                target_ns = target.stat().st_mtime_ns
            except (FileNotFoundError, NotADirectoryError):
                return True
            if target_ns + granularity_ns < source_ns:
                return True
        return False
