# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Ordered variable -> parameter substitutions."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, List, Optional, Tuple

from .grammar import VARIABLE_TYPES, Parameter, Variable
from .term import FoldFn, Term, VisitFn, fold_term, substitute, term_size, visit_term


@dataclass(frozen=True)
class Substitution(Term):
	bindings: Tuple[Tuple[Variable, Parameter], ...] = ()

	def __post_init__(self) -> None:
		seen = set()
		for var, _value in self.bindings:
			if not isinstance(var, VARIABLE_TYPES):
				raise ValueError(f"substitution key must be a variable, got {var!r}")
			if var in seen:
				raise ValueError(f"variable {var} bound twice in substitution")
			seen.add(var)

	@cached_property
	def _index(self) -> Dict[Any, Parameter]:
		return dict(self.bindings)

	def _fold(self, fn: FoldFn, depth: int) -> "Substitution":
		out: List[Tuple[Variable, Parameter]] = []
		changed = False
		for var, value in self.bindings:
			new_var = fold_term(var, fn, depth)
			if not isinstance(new_var, VARIABLE_TYPES):
				raise AssertionError(
					f"substitution key {var} folded to non-variable {new_var} (solver bug)"
				)
			new_value = fold_term(value, fn, depth)
			changed = changed or new_var is not var or new_value is not value
			out.append((new_var, new_value))
		if not changed:
			return self
		return Substitution(tuple(out))

	def _visit(self, fn: VisitFn, depth: int) -> None:
		for var, value in self.bindings:
			visit_term(var, fn, depth)
			visit_term(value, fn, depth)

	def _size(self) -> int:
		return 1 + sum(1 + term_size(value) for _var, value in self.bindings)

	def __len__(self) -> int:
		return len(self.bindings)

	def __contains__(self, var: object) -> bool:
		return var in self._index

	def get(self, var: Any) -> Optional[Parameter]:
		return self._index.get(var)

	def domain(self) -> Tuple[Variable, ...]:
		return tuple(var for var, _value in self.bindings)

	def range(self) -> Tuple[Parameter, ...]:
		return tuple(value for _var, value in self.bindings)

	def apply(self, term: Any) -> Any:
		"""Replace every free occurrence of a domain variable in `term`."""
		if not self.bindings:
			return term
		return substitute(term, self.get)

	def without(self, variables: Any) -> "Substitution":
		drop = set(variables)
		return Substitution(tuple((var, value) for var, value in self.bindings if var not in drop))

	def __add__(self, other: "Substitution") -> "Substitution":
		return Substitution(self.bindings + other.bindings)


__all__ = ["Substitution"]
