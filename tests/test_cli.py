"""CLI tests: in-process ``main([...])`` and a ``python -m jjbuild`` subprocess."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from conftest import FAKE_TOOLS, write_grammar
from jjbuild.__main__ import main

REPO_ROOT = Path(__file__).resolve().parents[1]


def _fake_tools_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "jjbuild.yaml"
    path.write_text(
        "source_directory: src\n"
        "output_directory: out\n"
        "build_directory: target\n"
        "tools:\n"
        f"  javacc: [{json.dumps(sys.executable)}, {json.dumps(str(FAKE_TOOLS / 'fake_javacc.py'))}]\n"
        f"  jjtree: [{json.dumps(sys.executable)}, {json.dumps(str(FAKE_TOOLS / 'fake_jjtree.py'))}]\n",
        encoding="utf-8",
    )
    return path


class TestMain:
    def test_pipelines(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["pipelines"]) == 0
        out = capsys.readouterr().out
        assert "jjtree-javacc\tsrc/main/jjtree\tjjtree -> javacc" in out
        assert out.splitlines()[0].startswith("javacc\t")
        assert "jjtree\tsrc/main/jjtree\tjjtree\n" in out
        assert "jtb\tsrc/main/jtb\tjtb\n" in out

    def test_no_command_is_usage_error(self) -> None:
        assert main([]) == 2

    def test_bad_option_is_usage_error(self) -> None:
        assert main(["run", "nope"]) == 2

    def test_scan_lists_stale(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        write_grammar(tmp_path / "src", "x/A.jj", "AParser", "x")
        rc = main(["scan", "--source", str(tmp_path / "src"), "--output", str(tmp_path / "out")])
        assert rc == 0
        assert "AParser.java" in capsys.readouterr().out

    def test_scan_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        write_grammar(tmp_path / "src", "x/A.jj", "AParser", "x")
        assert main(["scan", "--source", str(tmp_path / "src"), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["source_root_exists"] is True
        assert [g["target_file"] for g in data["grammars"]] == ["x/AParser.java"]

    def test_scan_without_output_ignores_default_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.chdir(tmp_path)
        g = write_grammar(tmp_path / "src", "x/A.jj", "AParser", "x")
        os.utime(g, ns=(1_000_000_000_000, 1_000_000_000_000))
        fresh = tmp_path / "target" / "generated-sources" / "javacc" / "x" / "AParser.java"
        fresh.parent.mkdir(parents=True)
        fresh.write_text("class AParser {}", encoding="utf-8")
        os.utime(fresh, ns=(2_000_000_000_000, 2_000_000_000_000))

        assert main(["scan", "--source", str(tmp_path / "src"), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [g["symbol_name"] for g in data["grammars"]] == ["AParser"]

    def test_scan_missing_root_is_success(self, tmp_path: Path) -> None:
        assert main(["scan", "--source", str(tmp_path / "absent")]) == 0

    def test_validate(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        good = tmp_path / "good.yaml"
        good.write_text("stale_millis: 10\n", encoding="utf-8")
        assert main(["validate", str(good)]) == 0
        assert "OK" in capsys.readouterr().out

        bad = tmp_path / "bad.yaml"
        bad.write_text("stale_millis: soon\n", encoding="utf-8")
        assert main(["validate", str(bad)]) == 2
        assert "ERROR" in capsys.readouterr().err

    def test_run_writes_report(self, tmp_path: Path) -> None:
        cfg = _fake_tools_yaml(tmp_path)
        write_grammar(tmp_path / "src", "org/demo/Calc.jjt", "CalcParser", "org.demo")
        report = tmp_path / "report.json"
        rc = main(["-q", "run", "jjtree-javacc", "--config", str(cfg), "--report", str(report), "--ci"])
        assert rc == 0
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["summary"]["status"] == "processed"
        assert data["run"]["created_at"] == "2000-01-01T00:00:00+00:00"
        assert (tmp_path / "out" / "org" / "demo" / "node" / "Node.java").is_file()

    def test_run_tool_failure_exit_code(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("FAKE_JAVACC_EXIT", "1")
        cfg = _fake_tools_yaml(tmp_path)
        write_grammar(tmp_path / "src", "P.jj", "P")
        assert main(["-q", "run", "javacc", "--config", str(cfg)]) == 1
        assert "javacc reported exit code 1" in capsys.readouterr().err

    def test_run_unreadable_grammar_exit_code(self, tmp_path: Path) -> None:
        cfg = _fake_tools_yaml(tmp_path)
        g = tmp_path / "src" / "Bad.jj"
        g.parent.mkdir(parents=True)
        g.write_bytes(b"PARSER_BEGIN(\xff)")
        cfg.write_text(cfg.read_text(encoding="utf-8") + "grammar_encoding: utf-8\n", encoding="utf-8")
        assert main(["-q", "run", "javacc", "--config", str(cfg)]) == 2

    def test_run_copy_failure_exit_code(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cfg = _fake_tools_yaml(tmp_path)
        write_grammar(tmp_path / "src", "org/demo/Calc.jjt", "CalcParser", "org.demo")
        (tmp_path / "out" / "org").mkdir(parents=True)
        (tmp_path / "out" / "org" / "demo").write_text("in the way", encoding="utf-8")
        assert main(["-q", "run", "jjtree-javacc", "--config", str(cfg)]) == 2
        assert "Unable to copy" in capsys.readouterr().err


def _run(cmd: list[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONHASHSEED"] = "0"
    env["PYTHONPATH"] = str(REPO_ROOT / "src")
    return subprocess.run(cmd, cwd=str(cwd), env=env, text=True, capture_output=True)


def test_cli_run_is_byte_deterministic_under_ci(tmp_path: Path) -> None:
    """Runs ``run --ci`` on an up-to-date tree twice; reports must be byte-identical."""
    _fake_tools_yaml(tmp_path)
    write_grammar(tmp_path / "src", "x/A.jj", "AParser", "x")

    base = [sys.executable, "-m", "jjbuild", "run", "javacc", "--config", "jjbuild.yaml", "--ci"]
    first = _run(base, cwd=tmp_path)
    assert first.returncode == 0, (first.stdout, first.stderr)
    assert "Processed 1 grammar" in first.stderr

    r1 = _run([*base, "--report", "a.json"], cwd=tmp_path)
    assert r1.returncode == 0, (r1.stdout, r1.stderr)
    r2 = _run([*base, "--report", "b.json"], cwd=tmp_path)
    assert r2.returncode == 0, (r2.stdout, r2.stderr)

    assert (tmp_path / "a.json").read_bytes() == (tmp_path / "b.json").read_bytes()
    assert "up to date" in r1.stderr


def test_cli_version_subprocess(tmp_path: Path) -> None:
    r = _run([sys.executable, "-m", "jjbuild", "--version"], cwd=tmp_path)
    assert r.returncode == 0
    assert r.stdout.startswith("jjbuild ")
