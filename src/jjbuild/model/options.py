"""Tri-state option blocks handed to the tool facades.

Every knob defaults to ``None`` which means *unset*: the facade omits the
flag entirely so the tool's own default, or an ``options { }`` directive
inside the grammar file, stays in charge. ``False`` is a real value and is
passed through as ``-FLAG=false``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Iterator, Mapping

from jjbuild.errors import InvalidConfiguration


def _flag(name: str) -> Any:
    return field(default=None, metadata={"flag": name})


def render_value(value: bool | int | str) -> str:
    """Render an option value in the generators' own syntax."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _OptionBlock:
    """Shared behaviour for the frozen option dataclasses below."""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Any:
        """Build the block from a config mapping, rejecting unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(
                f"unknown {cls.__name__} option(s): {', '.join(unknown)}"
            )
        return cls(**dict(data))

    def set_options(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(flag, value)`` for every option explicitly set, in declaration order."""
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is not None:
                yield f.metadata.get("flag", f.name), value


@dataclass(frozen=True)
class PipelineOptions(_OptionBlock):
    """Parser generator knobs (``javacc``)."""

    jdk_version: str | None = _flag("JDK_VERSION")
    lookahead: int | None = _flag("LOOKAHEAD")
    choice_ambiguity_check: int | None = _flag("CHOICE_AMBIGUITY_CHECK")
    other_ambiguity_check: int | None = _flag("OTHER_AMBIGUITY_CHECK")
    is_static: bool | None = _flag("STATIC")
    debug_parser: bool | None = _flag("DEBUG_PARSER")
    debug_lookahead: bool | None = _flag("DEBUG_LOOKAHEAD")
    debug_token_manager: bool | None = _flag("DEBUG_TOKEN_MANAGER")
    error_reporting: bool | None = _flag("ERROR_REPORTING")
    java_unicode_escape: bool | None = _flag("JAVA_UNICODE_ESCAPE")
    unicode_input: bool | None = _flag("UNICODE_INPUT")
    ignore_case: bool | None = _flag("IGNORE_CASE")
    common_token_action: bool | None = _flag("COMMON_TOKEN_ACTION")
    user_token_manager: bool | None = _flag("USER_TOKEN_MANAGER")
    user_char_stream: bool | None = _flag("USER_CHAR_STREAM")
    build_parser: bool | None = _flag("BUILD_PARSER")
    build_token_manager: bool | None = _flag("BUILD_TOKEN_MANAGER")
    token_manager_uses_parser: bool | None = _flag("TOKEN_MANAGER_USES_PARSER")
    sanity_check: bool | None = _flag("SANITY_CHECK")
    force_la_check: bool | None = _flag("FORCE_LA_CHECK")
    cache_tokens: bool | None = _flag("CACHE_TOKENS")
    keep_line_column: bool | None = _flag("KEEP_LINE_COLUMN")


@dataclass(frozen=True)
class TreeOptions(_OptionBlock):
    """JJTree-only knobs.

    ``node_package`` may start with ``*``; the orchestrator resolves it
    against each grammar's declared package before the facade sees it.
    ``JDK_VERSION`` and ``STATIC`` are shared with :class:`PipelineOptions`.
    """

    build_node_files: bool | None = _flag("BUILD_NODE_FILES")
    multi: bool | None = _flag("MULTI")
    node_default_void: bool | None = _flag("NODE_DEFAULT_VOID")
    node_class: str | None = _flag("NODE_CLASS")
    node_factory: bool | str | None = _flag("NODE_FACTORY")
    node_package: str | None = _flag("NODE_PACKAGE")
    node_prefix: str | None = _flag("NODE_PREFIX")
    node_scope_hook: bool | None = _flag("NODE_SCOPE_HOOK")
    node_uses_parser: bool | None = _flag("NODE_USES_PARSER")
    track_tokens: bool | None = _flag("TRACK_TOKENS")
    visitor: bool | None = _flag("VISITOR")
    visitor_data_type: str | None = _flag("VISITOR_DATA_TYPE")
    visitor_return_type: str | None = _flag("VISITOR_RETURN_TYPE")
    visitor_exception: str | None = _flag("VISITOR_EXCEPTION")


@dataclass(frozen=True)
class JTBOptions(_OptionBlock):
    """Java Tree Builder knobs.  JTB takes short switches, see ``tools/jtb.py``."""

    package_name: str | None = _flag("-p")
    node_package_name: str | None = _flag("-np")
    visitor_package_name: str | None = _flag("-vp")
    supress_error_checking: bool | None = _flag("-e")
    javadoc_friendly_comments: bool | None = _flag("-jd")
    descriptive_field_names: bool | None = _flag("-f")
    node_parent_class: str | None = _flag("-ns")
    parent_pointers: bool | None = _flag("-pp")
    special_tokens: bool | None = _flag("-tk")
    scheme: bool | None = _flag("-scheme")
    printer: bool | None = _flag("-printer")

    @property
    def effective_node_package(self) -> str:
        if self.package_name is not None:
            return self.package_name + ".syntaxtree"
        if self.node_package_name is not None:
            return self.node_package_name
        return "*.syntaxtree"

    @property
    def effective_visitor_package(self) -> str:
        if self.package_name is not None:
            return self.package_name + ".visitor"
        if self.visitor_package_name is not None:
            return self.visitor_package_name
        return "*.visitor"
