# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from formality.cli import main

PROGRAM = """
trait Foo<ty Self> where {}
trait Grow<ty Self> where {}
impl Foo(u32) where {}
impl<ty T> Grow(T) where {Grow(Vec<T>)}
"""


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text)
	return path


def test_prove_prints_answers(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	query = _write(tmp_path, "q.fml", "exists<ty X> {} => {Foo(X)}")
	assert main(["prove", str(prog), str(query)]) == 0
	out = capsys.readouterr().out
	assert out.splitlines() == ["proved", "  {?ty_0 => u32}"]


def test_commands_are_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
	caplog.set_level(logging.DEBUG, logger="formality.cli")
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	query = _write(tmp_path, "q.fml", "{} => {Foo(u32)}")
	assert main(["prove", str(prog), str(query)]) == 0
	assert main(["check", str(prog)]) == 0
	messages = [r.getMessage() for r in caplog.records if r.name == "formality.cli"]
	assert messages == [
		f"prove: {query} -> proved with 1 answer(s)",
		f"check: {prog} has 0 overlapping impl pair(s)",
	]


def test_prove_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	query = _write(tmp_path, "q.fml", "{} => {Foo(i32)}")
	assert main(["--json", "prove", str(prog), str(query)]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["status"] == "unprovable"
	assert payload["answers"] == []
	assert payload["diagnostics"] == []


def test_prove_overflow_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	query = _write(tmp_path, "q.fml", "{} => {Grow(u32)}")
	assert main(["--json", "--max-depth", "4", "prove", str(prog), str(query)]) == 2
	payload = json.loads(capsys.readouterr().out)
	assert payload["status"] == "overflow"
	assert any("maximum proof depth" in reason for reason in payload["reasons"])


def test_limits_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	query = _write(tmp_path, "q.fml", "{} => {Grow(u32)}")
	monkeypatch.setenv("FORMALITY_MAX_TERM_SIZE", "6")
	assert main(["--json", "prove", str(prog), str(query)]) == 2
	payload = json.loads(capsys.readouterr().out)
	assert any("maximum term size" in reason for reason in payload["reasons"])


def test_invalid_limit_is_a_usage_error(tmp_path: Path) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	with pytest.raises(SystemExit) as excinfo:
		main(["--max-depth", "0", "check", str(prog)])
	assert excinfo.value.code == 2


def test_check_ok(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM)
	assert main(["check", str(prog)]) == 0
	assert capsys.readouterr().out.strip() == "ok"


def test_check_reports_overlap(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", PROGRAM + "impl<ty T> Foo(T) where {}\n")
	assert main(["check", str(prog)]) == 1
	err = capsys.readouterr().err
	assert err.startswith("impls may overlap:\nimpl Foo(u32) where {}\nimpl<ty> Foo(^ty0_0) where {}")

	assert main(["--json", "check", str(prog)]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "E_IMPL_OVERLAP"
	assert diag["phase"] == "coherence"
	assert diag["line"] == 6


def test_parse_error_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	prog = _write(tmp_path, "prog.fml", "trait Foo<ty Self where {}\n")
	assert main(["--json", "check", str(prog)]) == 1
	payload = json.loads(capsys.readouterr().out)
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["code"] == "E_SYNTAX"
	assert diag["file"] == str(prog)
	assert diag["line"] == 1

	assert main(["check", str(prog)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{prog}:1:")
	assert "error[E_SYNTAX]" in err
