# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line driver.

	formality check PROGRAM          impl overlap check (exit 1 on overlap)
	formality prove PROGRAM QUERY    prove a query file against PROGRAM
	                                 (exit 1 when unprovable, 2 on overflow)

With --json, prints `{"exit_code": .., "diagnostics": [..], ..}`; otherwise
prints human-readable text (diagnostics on stderr).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .coherence.overlap import overlapping_impls
from .config import SolverConfig
from .core.diagnostics import Diagnostic
from .parser import load_program, load_query
from .prove.solver import ProofStatus, prove
from .types.pretty import pretty
from .types.wc import all_of

logger = logging.getLogger(__name__)


def _diag_to_json(diag: Diagnostic, phase: str, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	file = diag.span.file or str(source)
	return {
		"phase": diag.phase or phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _print_diags(diags: List[Diagnostic], source: Path) -> None:
	for d in diags:
		code = f"[{d.code}]" if d.code else ""
		print(f"{d.span.with_file(str(source))}: {d.severity}{code}: {d.message}", file=sys.stderr)
		for note in d.notes:
			print(f"  note: {note}", file=sys.stderr)


def _fail(args: argparse.Namespace, diags: List[Diagnostic], phase: str, source: Path) -> int:
	if args.json:
		payload = {"exit_code": 1, "diagnostics": [_diag_to_json(d, phase, source) for d in diags]}
		print(json.dumps(payload))
	else:
		_print_diags(diags, source)
	return 1


def _config(args: argparse.Namespace) -> SolverConfig:
	config = SolverConfig.from_env()
	if args.max_size is not None:
		config = replace(config, max_term_size=args.max_size)
	if args.max_depth is not None:
		config = replace(config, max_depth=args.max_depth)
	return config


def _cmd_check(args: argparse.Namespace, config: SolverConfig) -> int:
	decls, diags = load_program(args.program)
	if decls is None or diags:
		return _fail(args, diags, "parser", args.program)
	reports = list(overlapping_impls(decls, config))
	logger.debug("check: %s has %d overlapping impl pair(s)", args.program, len(reports))
	diags = [report.to_diagnostic() for report in reports]
	if args.json:
		print(json.dumps({
			"exit_code": 1 if reports else 0,
			"diagnostics": [_diag_to_json(d, "coherence", args.program) for d in diags],
		}))
	elif reports:
		for report in reports:
			print(report.message, file=sys.stderr)
	else:
		print("ok")
	return 1 if reports else 0


def _cmd_prove(args: argparse.Namespace, config: SolverConfig) -> int:
	decls, diags = load_program(args.program)
	if decls is None or diags:
		return _fail(args, diags, "parser", args.program)
	query, diags = load_query(args.query)
	if query is None:
		return _fail(args, diags, "parser", args.query)
	env, assumptions, goals = query.instantiate()
	result = prove(decls, env, assumptions, all_of(*goals), config=config)
	logger.debug("prove: %s -> %s with %d answer(s)", args.query, result.status.name.lower(), len(result.answers))
	exit_code = {ProofStatus.PROVED: 0, ProofStatus.UNPROVABLE: 1, ProofStatus.OVERFLOW: 2}[result.status]
	answers = sorted(pretty(answer) for answer in result.answers)
	if args.json:
		print(json.dumps({
			"exit_code": exit_code,
			"status": result.status.name.lower(),
			"answers": answers,
			"reasons": list(result.reasons),
			"diagnostics": [],
		}))
		return exit_code
	print(result.status.name.lower())
	for answer in answers:
		print(f"  {answer}")
	for reason in result.reasons:
		print(f"  {reason}", file=sys.stderr)
	return exit_code


def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(prog="formality", description="trait solver and coherence checker")
	parser.add_argument("--json", action="store_true", help="Emit structured JSON output")
	parser.add_argument("-v", "--verbose", action="store_true", help="Trace proof search to stderr")
	parser.add_argument("--max-size", type=int, default=None, help="Maximum goal size before overflow")
	parser.add_argument("--max-depth", type=int, default=None, help="Maximum goal nesting before overflow")
	sub = parser.add_subparsers(dest="command", required=True)
	check = sub.add_parser("check", help="Check that no two impls overlap")
	check.add_argument("program", type=Path, help="Declarations file")
	prove_cmd = sub.add_parser("prove", help="Prove a query against the declarations")
	prove_cmd.add_argument("program", type=Path, help="Declarations file")
	prove_cmd.add_argument("query", type=Path, help="Query file: exists<..> {assumptions} => {goals}")
	args = parser.parse_args(argv)

	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
	try:
		config = _config(args)
	except ValueError as err:
		parser.error(str(err))
	if args.command == "check":
		return _cmd_check(args, config)
	return _cmd_prove(args, config)


if __name__ == "__main__":
	sys.exit(main())
