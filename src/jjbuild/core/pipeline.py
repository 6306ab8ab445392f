"""Pipeline descriptors — which tools run, in what order, and where output goes.

A pipeline is data: an ordered tuple of :class:`Stage` entries and a tuple
of :class:`Relocation` entries.  ``core/runner.py`` walks any pipeline with
the same loop, so adding a preprocessor means adding a descriptor here.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from jjbuild.errors import InvalidConfiguration
from jjbuild.model import GrammarState
from jjbuild.model.grammar_info import GrammarInfo
from jjbuild.tools.base import Runner, ToolFacade
from jjbuild.tools.javacc import JavaCC
from jjbuild.tools.jjtree import JJTree
from jjbuild.tools.jtb import JTB as JTBTool

if TYPE_CHECKING:
    from jjbuild.core.config import BuildConfig

DEFAULT_OUTPUT_DIRECTORY = Path("target/generated-sources/javacc")
DEFAULT_NODE_PACKAGE = "*.node"


@dataclass
class GrammarJob:
    """Everything one grammar's trip through a pipeline needs.

    ``scratch`` belongs to this grammar only and is removed once its files
    have been relocated.
    """

    info: GrammarInfo
    config: BuildConfig
    scratch: Path
    output_root: Path
    interim_root: Path
    runner: Runner | None = None
    last_output: Path | None = None

    @property
    def parser_directory(self) -> Path:
        """Final, package-qualified directory of the parser files."""
        return self.output_root / self.info.package_directory

    @property
    def node_package(self) -> str | None:
        return self.info.resolve_package_name(
            self.config.jjtree.node_package or DEFAULT_NODE_PACKAGE
        )

    @property
    def jtb_node_package(self) -> str | None:
        return self.info.resolve_package_name(self.config.jtb.effective_node_package)

    @property
    def jtb_visitor_package(self) -> str | None:
        return self.info.resolve_package_name(self.config.jtb.effective_visitor_package)


PathResolver = Callable[[GrammarJob], Path]
ToolFactory = Callable[[GrammarJob, Path, Path], ToolFacade]


@dataclass(frozen=True)
class Stage:
    """One tool invocation: which facade, fed from where, writing where."""

    name: str
    make_tool: ToolFactory
    input_file: PathResolver
    output_directory: PathResolver
    running: GrammarState
    done: GrammarState


@dataclass(frozen=True)
class Relocation:
    """Copy ``*.<extension>`` files from a scratch folder into a package tree.

    ``extension`` defaults to the configured generator suffix.
    """

    source: PathResolver
    target_root: PathResolver
    package: Callable[[GrammarJob], str | None]
    update_pattern: Callable[[GrammarJob], str]
    extension: str | None = None


@dataclass(frozen=True)
class Pipeline:
    """Named tool chain.

    Grammars whose extension is not in ``preprocessed_extensions`` fall back
    to the single-stage ``javacc`` shape even inside a two-stage pipeline.
    ``stale_target`` maps a grammar to the output file its staleness is
    judged by; ``None`` means the parser file.
    """

    name: str
    default_source_directory: Path
    default_includes: tuple[str, ...]
    stages: tuple[Stage, ...]
    relocations: tuple[Relocation, ...] = ()
    preprocessed_extensions: frozenset[str] = frozenset()
    default_output_directory: Path = DEFAULT_OUTPUT_DIRECTORY
    stale_target: Callable[[GrammarInfo], Path] | None = None
    copies_custom_sources: bool = True

    @property
    def two_stage(self) -> bool:
        return len(self.stages) > 1


# ── stage factories ─────────────────────────────────────────────────


def _javacc(job: GrammarJob, input_file: Path, output_directory: Path) -> ToolFacade:
    return JavaCC(
        input_file,
        output_directory,
        job.config.javacc,
        command=job.config.tools.javacc,
        runner=job.runner,
    )


def _jjtree(job: GrammarJob, input_file: Path, output_directory: Path) -> ToolFacade:
    options = replace(job.config.jjtree, node_package=job.node_package)
    return JJTree(
        input_file,
        output_directory,
        options,
        job.config.javacc,
        command=job.config.tools.jjtree,
        runner=job.runner,
    )


def _jtb(job: GrammarJob, input_file: Path, output_directory: Path) -> ToolFacade:
    return JTBTool(
        input_file,
        output_directory,
        job.config.jtb,
        node_directory=job.scratch / "node",
        visitor_directory=job.scratch / "visitor",
        node_package=job.jtb_node_package,
        visitor_package=job.jtb_visitor_package,
        command=job.config.tools.jtb,
        runner=job.runner,
    )


def _grammar(job: GrammarJob) -> Path:
    return job.info.grammar_file


def _previous_output(job: GrammarJob) -> Path:
    if job.last_output is None:
        raise RuntimeError(f"no preprocessed grammar for {job.info.grammar_file}")
    return job.last_output


def _parser_relocation() -> Relocation:
    return Relocation(
        source=lambda job: job.scratch / "parser",
        target_root=lambda job: job.output_root,
        package=lambda job: job.info.package_name,
        update_pattern=lambda job: job.info.symbol_name + "*",
    )


def _grammar_relocation(scratch_folder: str) -> Relocation:
    """Publish the decorated ``<stem>.jj`` under the grammar's own package."""
    return Relocation(
        source=lambda job: job.scratch / scratch_folder,
        target_root=lambda job: job.output_root,
        package=lambda job: job.info.package_name,
        update_pattern=lambda job: "*",
        extension="jj",
    )


def _decorated_grammar(info: GrammarInfo) -> Path:
    return Path(info.package_directory, info.grammar_file.stem + ".jj")


# ── built-in pipelines ──────────────────────────────────────────────

JAVACC = Pipeline(
    name="javacc",
    default_source_directory=Path("src/main/javacc"),
    default_includes=("**/*.jj", "**/*.JJ"),
    stages=(
        Stage(
            name="javacc",
            make_tool=_javacc,
            input_file=_grammar,
            output_directory=lambda job: job.parser_directory,
            running=GrammarState.GENERATING,
            done=GrammarState.GENERATED,
        ),
    ),
)

JJTREE_JAVACC = Pipeline(
    name="jjtree-javacc",
    default_source_directory=Path("src/main/jjtree"),
    default_includes=("**/*.jj", "**/*.JJ", "**/*.jjt", "**/*.JJT"),
    stages=(
        Stage(
            name="jjtree",
            make_tool=_jjtree,
            input_file=_grammar,
            output_directory=lambda job: job.scratch / "node",
            running=GrammarState.PREPROCESSING,
            done=GrammarState.PREPROCESSED,
        ),
        Stage(
            name="javacc",
            make_tool=_javacc,
            input_file=_previous_output,
            output_directory=lambda job: job.scratch / "parser",
            running=GrammarState.GENERATING,
            done=GrammarState.GENERATED,
        ),
    ),
    relocations=(
        Relocation(
            source=lambda job: job.scratch / "node",
            target_root=lambda job: job.interim_root,
            package=lambda job: job.node_package,
            update_pattern=lambda job: "*",
        ),
        _parser_relocation(),
    ),
    preprocessed_extensions=frozenset({".jjt"}),
)

JTB_JAVACC = Pipeline(
    name="jtb-javacc",
    default_source_directory=Path("src/main/jtb"),
    default_includes=("**/*.jj", "**/*.JJ", "**/*.jtb", "**/*.JTB"),
    stages=(
        Stage(
            name="jtb",
            make_tool=_jtb,
            input_file=_grammar,
            output_directory=lambda job: job.scratch / "jj",
            running=GrammarState.PREPROCESSING,
            done=GrammarState.PREPROCESSED,
        ),
        Stage(
            name="javacc",
            make_tool=_javacc,
            input_file=_previous_output,
            output_directory=lambda job: job.scratch / "parser",
            running=GrammarState.GENERATING,
            done=GrammarState.GENERATED,
        ),
    ),
    relocations=(
        Relocation(
            source=lambda job: job.scratch / "node",
            target_root=lambda job: job.interim_root,
            package=lambda job: job.jtb_node_package,
            update_pattern=lambda job: "*",
        ),
        Relocation(
            source=lambda job: job.scratch / "visitor",
            target_root=lambda job: job.interim_root,
            package=lambda job: job.jtb_visitor_package,
            update_pattern=lambda job: "*",
        ),
        _parser_relocation(),
    ),
    preprocessed_extensions=frozenset({".jtb"}),
)

# ── preprocessor only: the decorated grammar is the product ─────────

JJTREE = Pipeline(
    name="jjtree",
    default_source_directory=Path("src/main/jjtree"),
    default_includes=("**/*.jjt", "**/*.JJT"),
    stages=(
        Stage(
            name="jjtree",
            make_tool=_jjtree,
            input_file=_grammar,
            output_directory=lambda job: job.scratch / "node",
            running=GrammarState.PREPROCESSING,
            done=GrammarState.PREPROCESSED,
        ),
    ),
    relocations=(
        Relocation(
            source=lambda job: job.scratch / "node",
            target_root=lambda job: job.output_root,
            package=lambda job: job.node_package,
            update_pattern=lambda job: "*",
        ),
        _grammar_relocation("node"),
    ),
    default_output_directory=Path("target/generated-sources/jjtree"),
    stale_target=_decorated_grammar,
    copies_custom_sources=False,
)

JTB = Pipeline(
    name="jtb",
    default_source_directory=Path("src/main/jtb"),
    default_includes=("**/*.jtb", "**/*.JTB"),
    stages=(
        Stage(
            name="jtb",
            make_tool=_jtb,
            input_file=_grammar,
            output_directory=lambda job: job.scratch / "jj",
            running=GrammarState.PREPROCESSING,
            done=GrammarState.PREPROCESSED,
        ),
    ),
    relocations=(
        Relocation(
            source=lambda job: job.scratch / "node",
            target_root=lambda job: job.output_root,
            package=lambda job: job.jtb_node_package,
            update_pattern=lambda job: "*",
        ),
        Relocation(
            source=lambda job: job.scratch / "visitor",
            target_root=lambda job: job.output_root,
            package=lambda job: job.jtb_visitor_package,
            update_pattern=lambda job: "*",
        ),
        _grammar_relocation("jj"),
    ),
    default_output_directory=Path("target/generated-sources/jtb"),
    stale_target=_decorated_grammar,
    copies_custom_sources=False,
)

PIPELINES: dict[str, Pipeline] = {
    p.name: p for p in (JAVACC, JJTREE_JAVACC, JTB_JAVACC, JJTREE, JTB)
}


def get_pipeline(name: str) -> Pipeline:
    """Look up a registered pipeline by name."""
    try:
        return PIPELINES[name]
    except KeyError:
        raise InvalidConfiguration(
            f"unknown pipeline {name!r}; expected one of {', '.join(sorted(PIPELINES))}"
        ) from None


def shape_for(pipeline: Pipeline, info: GrammarInfo) -> Pipeline:
    """Pick the concrete chain for one grammar within *pipeline*."""
    if not pipeline.two_stage:
        return pipeline
    if info.grammar_file.suffix.lower() in pipeline.preprocessed_extensions:
        return pipeline
    return JAVACC
