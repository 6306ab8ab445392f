"""Artifact relocation — move generated files from scratch into package trees."""

from __future__ import annotations

import logging
import shutil
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Sequence

from jjbuild.errors import RelocationError
from jjbuild.model import Suffix

_logger = logging.getLogger(__name__)


def package_path(package_name: str | None) -> Path:
    """``a.b.c`` → ``a/b/c``; empty or ``None`` → ``Path()``."""
    if not package_name:
        return Path()
    return Path(*package_name.split("."))


def find_source_file(rel_path: Path, roots: Sequence[Path]) -> Path | None:
    """Return the first existing ``root / rel_path`` across *roots*."""
    for root in roots:
        candidate = Path(root) / rel_path
        if candidate.exists():
            return candidate.absolute()
    return None


def _copy(src: Path, dest: Path) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        # copyfile, not copy2: the target must carry a fresh mtime.
        shutil.copyfile(src, dest)
    except OSError as exc:
        raise RelocationError(src, dest, exc.strerror or str(exc)) from exc


def copy_grammar_output(
    target_root: Path,
    package_name: str | None,
    scratch_dir: Path,
    update_pattern: str,
    *,
    suffix: Suffix | str = Suffix.JAVA,
    source_roots: Sequence[Path] = (),
) -> list[Path]:
    """Copy ``*.<suffix>`` files directly inside *scratch_dir* to the package tree.

    A file is copied when no counterpart exists in *source_roots*, or when the
    counterpart is the target itself and the filename matches
    *update_pattern*.  Any other counterpart is a user customisation and wins.
    *suffix* is a :class:`Suffix` or a bare extension such as ``"jj"``.

    Returns the list of files written; raises ``RelocationError`` when a
    copy fails.
    """
    if not scratch_dir.is_dir():
        return []
    extension = suffix.value if isinstance(suffix, Suffix) else suffix
    target_root = Path(target_root).absolute()
    pkg = package_path(package_name)
    written: list[Path] = []
    for generated in sorted(scratch_dir.glob(f"*.{extension}")):
        if not generated.is_file():
            continue
        rel = pkg / generated.name
        target = target_root / rel
        existing = find_source_file(rel, source_roots)
        overwrite = fnmatchcase(generated.name, update_pattern)
        if existing is None or (overwrite and existing == target):
            _copy(generated, target)
            written.append(target)
        else:
            _logger.debug("Detected customized generator output: %s", existing)
    return written
