"""ScanResult — ordered, duplicate-free set of grammars to (re)generate."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from jjbuild.model.grammar_info import GrammarInfo


class ScanResult:
    """Grammars found stale by one scan pass, in first-seen order.

    A result built with :meth:`missing` stands for "the source root does not
    exist"; it is empty like an up-to-date scan but reports
    ``source_root_exists == False`` so callers can log and skip.
    """

    __slots__ = ("source_root", "source_root_exists", "_grammars")

    def __init__(
        self,
        source_root: Path,
        grammars: Iterable[GrammarInfo] = (),
        *,
        source_root_exists: bool = True,
    ) -> None:
        self.source_root = source_root
        self.source_root_exists = source_root_exists
        self._grammars: dict[Path, GrammarInfo] = {}
        for info in grammars:
            self.add(info)

    @classmethod
    def missing(cls, source_root: Path) -> ScanResult:
        return cls(source_root, source_root_exists=False)

    def add(self, info: GrammarInfo) -> bool:
        """Append *info* unless its grammar file was already seen."""
        if info.grammar_file in self._grammars:
            return False
        self._grammars[info.grammar_file] = info
        return True

    @property
    def grammars(self) -> tuple[GrammarInfo, ...]:
        return tuple(self._grammars.values())

    def __iter__(self) -> Iterator[GrammarInfo]:
        return iter(self.grammars)

    def __len__(self) -> int:
        return len(self._grammars)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, GrammarInfo):
            item = item.grammar_file
        return item in self._grammars

    def __repr__(self) -> str:
        if not self.source_root_exists:
            return f"ScanResult({self.source_root!s}, missing)"
        return f"ScanResult({self.source_root!s}, {[str(g) for g in self]})"
