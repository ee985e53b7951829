# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Solver limits."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_MAX_TERM_SIZE = "FORMALITY_MAX_TERM_SIZE"
ENV_MAX_DEPTH = "FORMALITY_MAX_DEPTH"


@dataclass(frozen=True)
class SolverConfig:
	"""
	Bounds that keep proof search finite.

	`max_term_size` caps the size of any goal the solver is asked to prove
	(and of any elaborated hypothesis); `max_depth` caps the nesting of atomic
	goals. Exceeding either aborts the query with an overflow result.
	"""

	max_term_size: int = 128
	max_depth: int = 64

	def __post_init__(self) -> None:
		if self.max_term_size < 1:
			raise ValueError(f"max_term_size must be positive, got {self.max_term_size}")
		if self.max_depth < 1:
			raise ValueError(f"max_depth must be positive, got {self.max_depth}")

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SolverConfig":
		environ = os.environ if environ is None else environ
		defaults = cls()
		return cls(
			max_term_size=_int_var(environ, ENV_MAX_TERM_SIZE, defaults.max_term_size),
			max_depth=_int_var(environ, ENV_MAX_DEPTH, defaults.max_depth),
		)


def _int_var(environ: Mapping[str, str], name: str, default: int) -> int:
	raw = environ.get(name)
	if raw is None or raw.strip() == "":
		return default
	try:
		return int(raw)
	except ValueError:
		raise ValueError(f"{name} must be an integer, got {raw!r}") from None


__all__ = ["SolverConfig", "ENV_MAX_TERM_SIZE", "ENV_MAX_DEPTH"]
