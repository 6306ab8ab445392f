"""Tests for grammar metadata extraction and GrammarInfo placement."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import write_grammar
from jjbuild.core.metadata import find_package_name, find_parser_name, read_grammar
from jjbuild.errors import InvalidConfiguration, ReadError
from jjbuild.model import Suffix
from jjbuild.model.grammar_info import GrammarInfo


# ── text scan ───────────────────────────────────────────────────────


class TestTextScan:
    def test_package_found(self) -> None:
        assert find_package_name("PARSER_BEGIN(P)\npackage org.demo ;\n") == "org.demo"

    def test_first_package_wins(self) -> None:
        text = "package a.b;\npackage c.d;\n"
        assert find_package_name(text) == "a.b"

    def test_no_package(self) -> None:
        assert find_package_name("PARSER_BEGIN(P) PARSER_END(P)") == ""

    def test_package_in_comment_still_counts(self) -> None:
        """The scan is textual; comments are not skipped."""
        assert find_package_name("// package x.y;\n") == "x.y"

    def test_parser_name_with_whitespace(self) -> None:
        assert find_parser_name("PARSER_BEGIN (  MyParser )") == "MyParser"

    def test_no_parser_name(self) -> None:
        assert find_parser_name("options { STATIC = false; }") == ""


class TestReadGrammar:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ReadError, match="Unable to read grammar file"):
            read_grammar(tmp_path / "nope.jj")

    def test_undecodable(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.jj"
        p.write_bytes(b"PARSER_BEGIN(\xff\xfe)")
        with pytest.raises(ReadError):
            read_grammar(p, "utf-8")

    def test_unknown_encoding(self, tmp_path: Path) -> None:
        p = tmp_path / "g.jj"
        p.write_text("x", encoding="utf-8")
        with pytest.raises(ReadError, match="unknown encoding"):
            read_grammar(p, "no-such-codec")


# ── GrammarInfo ─────────────────────────────────────────────────────


class TestFromFile:
    def test_package_and_parser(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "org/demo/Calc.jj", "CalcParser", "org.demo")
        info = GrammarInfo.from_file(g, source_directory=tmp_path)
        assert info.package_name == "org.demo"
        assert info.package_directory == os.path.join("org", "demo")
        assert info.symbol_name == "CalcParser"
        assert info.target_file == Path("org", "demo", "CalcParser.java")
        assert info.relative_grammar_file == Path("org/demo/Calc.jj")

    def test_default_package(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "Simple.jj", "SimpleParser")
        info = GrammarInfo.from_file(g)
        assert info.package_name == ""
        assert info.package_directory == ""
        assert info.target_file == Path("SimpleParser.java")

    def test_symbol_falls_back_to_stem(self, tmp_path: Path) -> None:
        g = tmp_path / "Foo.jj"
        g.write_text("options { STATIC = true; }\n", encoding="utf-8")
        info = GrammarInfo.from_file(g)
        assert info.symbol_name == "Foo"
        assert info.target_file == Path("Foo.java")

    def test_suffix(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "P.jj", "P")
        assert GrammarInfo.from_file(g, suffix=Suffix.CPP).target_file == Path("P.cc")

    def test_override_directory(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "P.jj", "P", "ignored.pkg")
        info = GrammarInfo.from_file(g, package_override="com/acme")
        assert info.package_name == "com.acme"
        assert info.target_file == Path("com", "acme", "P.java")

    def test_override_dotted(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "P.jj", "P")
        assert GrammarInfo.from_file(g, package_override="com.acme").package_name == "com.acme"

    def test_override_absolute_rejected(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "P.jj", "P")
        with pytest.raises(InvalidConfiguration, match="relative"):
            GrammarInfo.from_file(g, package_override=str(tmp_path))

    @pytest.mark.parametrize("bad", ["", "a..b", "a//b"])
    def test_override_malformed_rejected(self, tmp_path: Path, bad: str) -> None:
        g = write_grammar(tmp_path, "P.jj", "P")
        with pytest.raises(InvalidConfiguration):
            GrammarInfo.from_file(g, package_override=bad)

    def test_unreadable_grammar(self, tmp_path: Path) -> None:
        with pytest.raises(ReadError):
            GrammarInfo.from_file(tmp_path / "missing.jj")

    def test_str(self, tmp_path: Path) -> None:
        g = write_grammar(tmp_path, "P.jj", "P")
        assert str(GrammarInfo.from_file(g)).endswith("-> P.java")


class TestResolvePackageName:
    @pytest.fixture
    def with_pkg(self, tmp_path: Path) -> GrammarInfo:
        return GrammarInfo.from_file(write_grammar(tmp_path, "a/P.jj", "P", "a.b"))

    @pytest.fixture
    def without_pkg(self, tmp_path: Path) -> GrammarInfo:
        return GrammarInfo.from_file(write_grammar(tmp_path, "Q.jj", "Q"))

    def test_star_dot(self, with_pkg: GrammarInfo) -> None:
        assert with_pkg.resolve_package_name("*.node") == "a.b.node"

    def test_star_no_dot(self, with_pkg: GrammarInfo) -> None:
        assert with_pkg.resolve_package_name("*node") == "a.bnode"

    def test_literal_untouched(self, with_pkg: GrammarInfo) -> None:
        assert with_pkg.resolve_package_name("node") == "node"

    def test_none(self, with_pkg: GrammarInfo) -> None:
        assert with_pkg.resolve_package_name(None) is None

    def test_default_package_drops_leading_dot(self, without_pkg: GrammarInfo) -> None:
        assert without_pkg.resolve_package_name("*.node") == "node"
        assert without_pkg.resolve_package_name("*node") == "node"
