# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser entry points.

`parse_*` raise on malformed input (lark's `UnexpectedInput` for syntax
errors, `ProgramParseError` for scoping errors). The `load_*` helpers read a
file and collect those failures as parser-phase diagnostics instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from ..core.diagnostics import Diagnostic
from ..core.span import Span
from ..prove.decls import Decls
from . import parser as _parser
from .parser import Located, ParsedQuery, ProgramParseError, parse_program, parse_query, parse_wc, parse_wcs


def _span_in_file(path: Path, loc: object | None) -> Span:
	return Span.from_loc(loc, file=str(path))


def _syntax_diagnostic(path: Path, err: UnexpectedInput) -> Diagnostic:
	span = Span(
		file=str(path),
		line=getattr(err, "line", None),
		column=getattr(err, "column", None),
		raw=err,
	)
	return Diagnostic(message=str(err).strip().splitlines()[0], code="E_SYNTAX", phase="parser", span=span)


def load_program(path: Path) -> Tuple[Optional[Decls], List[Diagnostic]]:
	"""Parse a declarations file; duplicate declarations are reported too."""
	source = path.read_text()
	try:
		decls = _parser.parse_program(source)
	except ProgramParseError as err:
		return None, [Diagnostic(message=str(err), code="E_PARSE", phase="parser", span=_span_in_file(path, err.loc))]
	except UnexpectedInput as err:
		return None, [_syntax_diagnostic(path, err)]
	diagnostics = [
		Diagnostic(
			message=d.message,
			code=d.code,
			phase=d.phase,
			severity=d.severity,
			span=_span_in_file(path, d.span.raw),
			notes=list(d.notes),
		)
		for d in decls.diagnostics
	]
	return decls, diagnostics


def load_query(path: Path) -> Tuple[Optional[ParsedQuery], List[Diagnostic]]:
	source = path.read_text()
	try:
		return _parser.parse_query(source), []
	except ProgramParseError as err:
		return None, [Diagnostic(message=str(err), code="E_PARSE", phase="parser", span=_span_in_file(path, err.loc))]
	except UnexpectedInput as err:
		return None, [_syntax_diagnostic(path, err)]


__all__ = [
	"Located",
	"ParsedQuery",
	"ProgramParseError",
	"parse_program",
	"parse_query",
	"parse_wc",
	"parse_wcs",
	"load_program",
	"load_query",
]
