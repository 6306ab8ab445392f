"""Build configuration dataclass and its YAML loader."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from jjbuild.contracts.load import validate_instance
from jjbuild.errors import InvalidConfiguration
from jjbuild.model import Suffix
from jjbuild.model.options import JTBOptions, PipelineOptions, TreeOptions
from jjbuild.tools import javacc as _javacc
from jjbuild.tools import jjtree as _jjtree
from jjbuild.tools import jtb as _jtb

CONFIG_FILENAMES = ("jjbuild.yaml", "jjbuild.yml", ".jjbuild.yaml")

# Environment variable → tool name; values are shlex-split commands.
_ENV_TOOL_COMMANDS = {
    "JJBUILD_JAVACC": "javacc",
    "JJBUILD_JJTREE": "jjtree",
    "JJBUILD_JTB": "jtb",
}


@dataclass(frozen=True)
class ToolCommands:
    """Command prefixes used to launch each generator."""

    javacc: tuple[str, ...] = _javacc.DEFAULT_COMMAND
    jjtree: tuple[str, ...] = _jjtree.DEFAULT_COMMAND
    jtb: tuple[str, ...] = _jtb.DEFAULT_COMMAND


@dataclass(frozen=True)
class BuildConfig:
    """Immutable build configuration.

    ``source_directory`` and ``output_directory`` left as ``None`` fall back
    to the selected pipeline's defaults.  ``interim_directory`` is where
    preprocessor side products (tree nodes, visitors) land; ``None`` means
    alongside the parser in ``output_directory``.
    """

    source_directory: Path | None = None
    output_directory: Path | None = None
    interim_directory: Path | None = None
    build_directory: Path = Path("target")
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    stale_millis: int = 0
    grammar_encoding: str | None = None
    package_override: str | None = None
    compile_source_roots: tuple[Path, ...] = ()
    suffix: Suffix = Suffix.JAVA
    javacc: PipelineOptions = field(default_factory=PipelineOptions)
    jjtree: TreeOptions = field(default_factory=TreeOptions)
    jtb: JTBOptions = field(default_factory=JTBOptions)
    tools: ToolCommands = field(default_factory=ToolCommands)

    def __post_init__(self) -> None:
        if self.stale_millis < 0:
            raise InvalidConfiguration("stale_millis must not be negative")
        if self.package_override is not None and os.path.isabs(self.package_override):
            raise InvalidConfiguration(
                f"package_override must be relative: {self.package_override}"
            )

    def with_overrides(self, **overrides: Any) -> BuildConfig:
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    # ── loading ─────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, base_dir: Path | None = None) -> BuildConfig:
        """Build a config from a schema-valid mapping.

        Relative paths resolve against *base_dir* (the config file's folder).
        """
        try:
            validate_instance(data, "config.schema.json")
        except jsonschema.ValidationError as exc:
            where = "/".join(str(p) for p in exc.absolute_path) or "<root>"
            raise InvalidConfiguration(f"invalid config at {where}: {exc.message}") from exc

        base = base_dir or Path.cwd()

        def _path(key: str) -> Path | None:
            value = data.get(key)
            return None if value is None else base / value

        kwargs: dict[str, Any] = {
            "source_directory": _path("source_directory"),
            "output_directory": _path("output_directory"),
            "interim_directory": _path("interim_directory"),
            "includes": tuple(data.get("includes", ())),
            "excludes": tuple(data.get("excludes", ())),
            "stale_millis": data.get("stale_millis", 0),
            "grammar_encoding": data.get("grammar_encoding"),
            "package_override": data.get("package_override"),
            "compile_source_roots": tuple(
                base / p for p in data.get("compile_source_roots", ())
            ),
            "suffix": Suffix(data.get("suffix", Suffix.JAVA.value)),
            "javacc": PipelineOptions.from_mapping(data.get("javacc")),
            "jjtree": TreeOptions.from_mapping(data.get("jjtree")),
            "jtb": JTBOptions.from_mapping(data.get("jtb")),
            "tools": _tool_commands(data.get("tools") or {}),
        }
        if "build_directory" in data:
            kwargs["build_directory"] = base / data["build_directory"]
        else:
            kwargs["build_directory"] = base / "target"
        return cls(**kwargs)

    @classmethod
    def load(cls, config_path: Path) -> BuildConfig:
        """Load config from a YAML file, then apply environment overrides."""
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise InvalidConfiguration(f"cannot read config {config_path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"malformed YAML in {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"{config_path}: top level must be a mapping")
        return cls.from_dict(data, base_dir=Path(config_path).parent).apply_env()

    @classmethod
    def discover(cls, root: Path) -> BuildConfig:
        """Auto-discover configuration from a project root."""
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.exists():
                return cls.load(candidate)
        return cls().apply_env()

    def apply_env(self, environ: dict[str, str] | None = None) -> BuildConfig:
        """Apply ``JJBUILD_*`` environment overrides."""
        env = os.environ if environ is None else environ
        tools = self.tools
        for var, tool in _ENV_TOOL_COMMANDS.items():
            value = env.get(var)
            if value:
                tools = replace(tools, **{tool: tuple(shlex.split(value))})
        stale_millis = self.stale_millis
        raw = env.get("JJBUILD_STALE_MILLIS")
        if raw:
            try:
                stale_millis = int(raw)
            except ValueError as exc:
                raise InvalidConfiguration(
                    f"JJBUILD_STALE_MILLIS must be an integer, got {raw!r}"
                ) from exc
        return replace(self, tools=tools, stale_millis=stale_millis)


def _tool_commands(data: dict[str, Any]) -> ToolCommands:
    commands: dict[str, tuple[str, ...]] = {}
    for tool, value in data.items():
        commands[tool] = tuple(shlex.split(value)) if isinstance(value, str) else tuple(value)
    return ToolCommands(**commands)
