"""JTB facade — Java Tree Builder, the alternative preprocessor for ``*.jtb``."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jjbuild.model.options import JTBOptions
from jjbuild.tools.base import Runner, ToolFacade

DEFAULT_COMMAND: tuple[str, ...] = ("jtb",)

_SWITCHES = (
    "supress_error_checking",
    "javadoc_friendly_comments",
    "descriptive_field_names",
    "parent_pointers",
    "special_tokens",
    "scheme",
    "printer",
)


class JTB(ToolFacade):
    """Runs JTB on one grammar.

    JTB writes the decorated grammar to ``<output dir>/<stem>.jj`` and the
    syntax-tree and visitor classes to their own directories.  Resolved
    ``node_package`` / ``visitor_package`` take precedence over
    ``options.package_name``.
    """

    name = "jtb"

    def __init__(
        self,
        input_file: Path,
        output_directory: Path,
        options: JTBOptions | None = None,
        *,
        node_directory: Path | None = None,
        visitor_directory: Path | None = None,
        node_package: str | None = None,
        visitor_package: str | None = None,
        command: Sequence[str] = DEFAULT_COMMAND,
        runner: Runner | None = None,
    ) -> None:
        super().__init__(input_file, output_directory, command=command, runner=runner)
        self.options = options or JTBOptions()
        self.node_directory = Path(node_directory).absolute() if node_directory else None
        self.visitor_directory = (
            Path(visitor_directory).absolute() if visitor_directory else None
        )
        self.node_package = node_package
        self.visitor_package = visitor_package

    @property
    def output_file(self) -> Path:
        return self.output_directory / (self.input_file.stem + ".jj")

    def arguments(self) -> list[str]:
        opts = self.options
        args: list[str] = []
        if self.node_package is None and self.visitor_package is None and opts.package_name:
            args += ["-p", opts.package_name]
        else:
            node_pkg = self.node_package or opts.node_package_name
            visitor_pkg = self.visitor_package or opts.visitor_package_name
            if node_pkg:
                args += ["-np", node_pkg]
            if visitor_pkg:
                args += ["-vp", visitor_pkg]
        if self.node_directory is not None:
            args += ["-nd", str(self.node_directory)]
        if self.visitor_directory is not None:
            args += ["-vd", str(self.visitor_directory)]
        for name in _SWITCHES:
            if getattr(opts, name):
                args.append(JTBOptions.__dataclass_fields__[name].metadata["flag"])
        if opts.node_parent_class is not None:
            args += ["-ns", opts.node_parent_class]
        args += ["-o", str(self.output_file)]
        args.append(str(self.input_file))
        return args

    def run(self) -> None:
        for directory in (self.node_directory, self.visitor_directory):
            if directory is not None:
                directory.mkdir(parents=True, exist_ok=True)
        super().run()
