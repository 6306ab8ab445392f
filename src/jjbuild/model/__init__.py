"""Enums shared across the scanner, the orchestrator and the run report."""

from __future__ import annotations

from enum import Enum


class Suffix(str, Enum):
    """File extension of the artifacts a generator emits."""

    JAVA = "java"
    CPP = "cc"
    CSHARP = "cs"


class GrammarState(str, Enum):
    """Per-grammar pipeline state.

    ``PENDING → PREPROCESSING → PREPROCESSED → GENERATING → GENERATED →
    RELOCATING → DONE``; single-stage grammars skip the two preprocessing
    states and preprocessor-only pipelines skip the two generating ones.
    ``FAILED`` is terminal.
    """

    PENDING = "pending"
    PREPROCESSING = "preprocessing"
    PREPROCESSED = "preprocessed"
    GENERATING = "generating"
    GENERATED = "generated"
    RELOCATING = "relocating"
    DONE = "done"
    FAILED = "failed"


class ScanStatus(str, Enum):
    """Outcome of one scan-and-generate invocation."""

    MISSING_SOURCE_ROOT = "missing_source_root"
    UP_TO_DATE = "up_to_date"
    PROCESSED = "processed"
