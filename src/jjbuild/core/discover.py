"""File discovery — find grammar files matching Ant-style include/exclude patterns."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from jjbuild.errors import ScanError

# Version-control metadata directories, always skipped.
_DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        "CVS",
        "_darcs",
        ".arch-ids",
    }
)

_DEFAULT_IGNORE_FILES = frozenset({".DS_Store", ".cvsignore", ".gitignore"})


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate an Ant-style pattern into an anchored regex.

    ``**`` spans any number of directories (including none), ``*`` and ``?``
    stay inside one path segment.  A trailing ``/`` means ``/**``.
    """
    pat = pattern.replace("\\", "/")
    if pat.endswith("/"):
        pat += "**"
    parts = [p for p in pat.split("/") if p]
    out: list[str] = []
    for i, part in enumerate(parts):
        last = i == len(parts) - 1
        if part == "**":
            out.append(".*" if last else "(?:[^/]*/)*")
            continue
        seg = ""
        for ch in part:
            if ch == "*":
                seg += "[^/]*"
            elif ch == "?":
                seg += "[^/]"
            else:
                seg += re.escape(ch)
        out.append(seg if last else seg + "/")
    return re.compile("".join(out) + r"\Z")


def match_pattern(pattern: str, rel_path: str) -> bool:
    """Return True if the POSIX *rel_path* matches the Ant-style *pattern*."""
    return _compile_pattern(pattern).match(rel_path) is not None


@dataclass(frozen=True)
class DiscoverConfig:
    """Configuration for grammar discovery."""

    root: Path = field(default_factory=lambda: Path("."))
    includes: tuple[str, ...] = ("**/*.jj", "**/*.JJ")
    excludes: tuple[str, ...] = ()
    ignore_dirs: frozenset[str] = _DEFAULT_EXCLUDES
    ignore_files: frozenset[str] = _DEFAULT_IGNORE_FILES
    follow_symlinks: bool = False


def iter_grammar_files(cfg: DiscoverConfig) -> Iterator[Path]:
    """Yield absolute paths of matching files under *cfg.root*, sorted per directory.

    Raises
    ------
    ScanError
        If any directory in the walk cannot be listed.
    """
    root = cfg.root

    def _fail(exc: OSError) -> None:
        raise ScanError(root, exc.strerror or str(exc)) from exc

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_fail, followlinks=cfg.follow_symlinks
    ):
        dirnames[:] = sorted(d for d in dirnames if d not in cfg.ignore_dirs)
        base = Path(dirpath)
        for name in sorted(filenames):
            if name in cfg.ignore_files:
                continue
            p = base / name
            if p.is_symlink() and not cfg.follow_symlinks:
                continue
            rel = p.relative_to(root).as_posix()
            if not any(match_pattern(pat, rel) for pat in cfg.includes):
                continue
            if any(match_pattern(pat, rel) for pat in cfg.excludes):
                continue
            yield p.absolute()


def discover_grammar_files(
    root: Path,
    *,
    include: list[str] | tuple[str, ...] | None = None,
    exclude: list[str] | tuple[str, ...] | None = None,
) -> list[Path]:
    """Find grammar files under *root* in deterministic walk order.

    Parameters
    ----------
    root:
        Directory to scan.
    include:
        Ant-style patterns to include.  Default: ``["**/*.jj", "**/*.JJ"]``.
    exclude:
        Ant-style patterns to exclude.

    Returns
    -------
    List of absolute ``Path`` objects, no duplicates.
    """
    cfg = DiscoverConfig(
        root=root,
        includes=tuple(include) if include else DiscoverConfig.includes,
        excludes=tuple(exclude or ()),
    )
    return list(dict.fromkeys(iter_grammar_files(cfg)))
