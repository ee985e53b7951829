# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source positions for diagnostics.

Declarations and parse errors carry lark positions (`Located`, or lark's
own exceptions); `Span.from_loc` reads `line`/`column` off whichever it is
given and keeps the object in `raw`. Spans render as `file:line:column`,
with `?` for anything unknown.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		if isinstance(loc, cls):
			return loc if file is None else loc.with_file(file)
		span = cls(
			file=getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			raw=loc,
		)
		return span if file is None else span.with_file(file)

	def with_file(self, file: str) -> "Span":
		"""Attach `file` unless the span already names one."""
		return self if self.file else replace(self, file=file)

	def __str__(self) -> str:
		line = "?" if self.line is None else self.line
		column = "?" if self.column is None else self.column
		return f"{self.file or '<input>'}:{line}:{column}"


__all__ = ["Span"]
