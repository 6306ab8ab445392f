"""Grammar metadata — recover package and parser name from raw grammar text.

This is a plain text scan, not a parse.  A ``package`` statement inside a
comment or string literal still counts; some grammars rely on that to pin
the package of generated files, so keep the scan naive.
"""

from __future__ import annotations

import locale
import re
from pathlib import Path

from jjbuild.errors import ReadError

_PACKAGE_RE = re.compile(r"package\s+([^\s.;]+(\.[^\s.;]+)*)\s*;")
_PARSER_BEGIN_RE = re.compile(r"PARSER_BEGIN\s*\(\s*([^\s)]+)\s*\)")


def default_encoding() -> str:
    """Platform text encoding, the same one the JVM tools fall back to."""
    return locale.getpreferredencoding(False)


def read_grammar(path: Path, encoding: str | None = None) -> str:
    """Read *path* once, decoding with *encoding* (platform default if ``None``).

    Raises
    ------
    ReadError
        If the file is missing, unreadable, or not valid in that encoding.
    """
    enc = encoding or default_encoding()
    try:
        return path.read_text(encoding=enc)
    except UnicodeDecodeError as exc:
        raise ReadError(path, f"not decodable as {enc}: {exc.reason}") from exc
    except LookupError as exc:
        raise ReadError(path, f"unknown encoding {enc!r}") from exc
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc


def find_package_name(grammar: str) -> str:
    """Return the first declared ``package a.b.c;`` or ``""``."""
    m = _PACKAGE_RE.search(grammar)
    return m.group(1) if m else ""


def find_parser_name(grammar: str) -> str:
    """Return the name in the first ``PARSER_BEGIN(Name)`` or ``""``."""
    m = _PARSER_BEGIN_RE.search(grammar)
    return m.group(1) if m else ""
