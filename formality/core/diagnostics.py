# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostics reported by the checker and the command line driver.

A diagnostic is a message plus an optional code, phase label and span.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .span import Span


@dataclass
class Diagnostic:
	"""A parse, declaration or coherence diagnostic."""

	message: str
	code: Optional[str] = None
	# "parser", "decls", "coherence" or "prove".
	phase: Optional[str] = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: List[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


__all__ = ["Diagnostic"]
