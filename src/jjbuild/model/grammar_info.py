"""GrammarInfo — one grammar source file and where its output belongs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from jjbuild.core.metadata import find_package_name, find_parser_name, read_grammar
from jjbuild.errors import InvalidConfiguration
from jjbuild.model import Suffix


def _normalize_override(package_override: str | PurePath) -> str:
    """Turn a relative package directory or dotted name into a dotted name."""
    raw = str(package_override)
    if PurePath(raw).is_absolute() or os.path.isabs(raw):
        raise InvalidConfiguration(
            f"package directory must be relative to source root: {raw}"
        )
    if raw.strip() == "":
        raise InvalidConfiguration("package override must not be empty")
    segments = raw.replace("\\", "/").replace(".", "/").split("/")
    if any(seg.strip() == "" for seg in segments):
        raise InvalidConfiguration(f"malformed package override: {raw!r}")
    return ".".join(segments)


@dataclass(frozen=True, slots=True)
class GrammarInfo:
    """Immutable description of one grammar and its derived placement.

    ``package_directory`` is always ``package_name`` with dots turned into
    ``os.sep`` (``""`` for the default package) and ``target_file`` is always
    relative so it composes with any output root.
    """

    grammar_file: Path
    package_name: str
    package_directory: str
    symbol_name: str
    target_file: Path
    source_directory: Path | None = None

    @classmethod
    def from_file(
        cls,
        grammar_file: Path,
        *,
        source_directory: Path | None = None,
        package_override: str | PurePath | None = None,
        suffix: Suffix = Suffix.JAVA,
        encoding: str | None = None,
    ) -> GrammarInfo:
        """Read *grammar_file* once and derive its metadata.

        Raises ``ReadError`` when the file cannot be read and
        ``InvalidConfiguration`` for an absolute or malformed override.
        """
        if package_override is not None:
            package_name = _normalize_override(package_override)
        grammar_file = Path(grammar_file).absolute()
        grammar = read_grammar(grammar_file, encoding)

        if package_override is None:
            package_name = find_package_name(grammar)
        package_directory = package_name.replace(".", os.sep)

        symbol_name = find_parser_name(grammar) or grammar_file.stem
        target_file = Path(package_directory, f"{symbol_name}.{Suffix(suffix).value}")

        return cls(
            grammar_file=grammar_file,
            package_name=package_name,
            package_directory=package_directory,
            symbol_name=symbol_name,
            target_file=target_file,
            source_directory=(
                Path(source_directory).absolute() if source_directory else None
            ),
        )

    @property
    def relative_grammar_file(self) -> Path:
        """Grammar path relative to the scan root (or just its name)."""
        if self.source_directory is None:
            return Path(self.grammar_file.name)
        return self.grammar_file.relative_to(self.source_directory)

    def resolve_package_name(self, name: str | None) -> str | None:
        """Substitute a leading ``*`` with the declared package.

        ``*.node`` becomes ``<package>.node``; without a declared package the
        leading ``*.`` is dropped so the result never starts with a dot.
        """
        if name is None or not name.startswith("*"):
            return name
        rest = name[1:]
        if self.package_name:
            return self.package_name + rest
        return rest[1:] if rest.startswith(".") else rest

    def __str__(self) -> str:
        return f"{self.grammar_file} -> {self.target_file}"
