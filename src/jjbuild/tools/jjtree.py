"""JJTree facade — the tree-decorating preprocessor for ``*.jjt`` grammars."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jjbuild.model.options import PipelineOptions, TreeOptions, render_value
from jjbuild.tools.base import Runner, ToolFacade

DEFAULT_COMMAND: tuple[str, ...] = ("jjtree",)


class JJTree(ToolFacade):
    """Runs ``jjtree`` on one grammar, producing ``<stem>.jj`` plus node files.

    ``JDK_VERSION`` and ``STATIC`` come from the shared generator options;
    everything else from :class:`TreeOptions`.
    """

    name = "jjtree"

    def __init__(
        self,
        input_file: Path,
        output_directory: Path,
        options: TreeOptions | None = None,
        common: PipelineOptions | None = None,
        *,
        command: Sequence[str] = DEFAULT_COMMAND,
        runner: Runner | None = None,
    ) -> None:
        super().__init__(input_file, output_directory, command=command, runner=runner)
        self.options = options or TreeOptions()
        self.common = common or PipelineOptions()

    @property
    def output_file(self) -> Path:
        return self.output_directory / (self.input_file.stem + ".jj")

    def arguments(self) -> list[str]:
        args: list[str] = []
        if self.common.jdk_version is not None:
            args.append(f"-JDK_VERSION={self.common.jdk_version}")
        if self.common.is_static is not None:
            args.append(f"-STATIC={render_value(self.common.is_static)}")
        args.extend(f"-{flag}={render_value(v)}" for flag, v in self.options.set_options())
        args.append(f"-JJTREE_OUTPUT_DIRECTORY={self.output_directory}")
        args.append(str(self.input_file))
        return args
