# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
De Bruijn binders.

`Binder(kinds, term)` binds `len(kinds)` variables. Inside `term` a bound
occurrence is `BoundVar(kind, debruijn, var_index)` where `debruijn` counts
the binders crossed between the occurrence and the binder that introduces it
(0 = innermost) and `var_index` selects the variable within that binder.

Opening replaces the depth-0 occurrences with free placeholders
(`BoundVar(kind, None, i)`) and decrements deeper indices; closing
(`Binder.new` / `Binder.mentioned`) is the exact inverse. Callers pick the
placeholder index range, so two opens with distinct ranges never collide.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Optional, Sequence, Tuple, TypeVar

from .grammar import BoundVar, Parameter, ParameterKind, parameter_kind
from .term import FoldFn, Term, VisitFn, fold_term, free_variables, shift_in, term_size, visit_term

T = TypeVar("T")


@dataclass(frozen=True)
class Binder(Term, Generic[T]):
	kinds: Tuple[ParameterKind, ...]
	term: T

	def _fold(self, fn: FoldFn, depth: int) -> "Binder[T]":
		new = fold_term(self.term, fn, depth + 1)
		if new is self.term:
			return self
		return Binder(self.kinds, new)

	def _visit(self, fn: VisitFn, depth: int) -> None:
		visit_term(self.term, fn, depth + 1)

	def _size(self) -> int:
		return 1 + term_size(self.term)

	@property
	def len(self) -> int:
		return len(self.kinds)

	@classmethod
	def dummy(cls, term: T) -> "Binder[T]":
		"""A binder with no variables around `term`."""
		return cls((), shift_in(term, 1))

	@classmethod
	def new(cls, variables: Sequence[Any], term: T) -> "Binder[T]":
		"""Close `term` over `variables`; each variable becomes bound at its position."""
		index: Dict[Any, int] = {}
		for i, var in enumerate(variables):
			if not var.is_free:
				raise AssertionError(f"cannot bind non-free variable {var!r} (solver bug)")
			if var in index:
				raise AssertionError(f"variable {var!r} bound twice (solver bug)")
			index[var] = i

		def _close(var: Any, depth: int) -> Optional[Any]:
			if var.is_free:
				i = index.get(var)
				if i is None:
					return None
				return BoundVar(var.kind, depth, i)
			if var.debruijn >= depth:
				return BoundVar(var.kind, var.debruijn + 1, var.var_index)
			return None

		kinds = tuple(var.kind for var in variables)
		return cls(kinds, fold_term(term, _close, 0))

	@classmethod
	def mentioned(cls, variables: Iterable[Any], term: T) -> "Binder[T]":
		"""Like `new`, but only binds the variables that occur in `term`."""
		present = set(free_variables(term))
		return cls.new([var for var in variables if var in present], term)

	def open(self, first_index: int = 0) -> Tuple[Tuple[BoundVar, ...], T]:
		"""Replace the bound variables with placeholders `first_index..`."""
		placeholders = tuple(BoundVar(kind, None, first_index + i) for i, kind in enumerate(self.kinds))
		return placeholders, self.instantiate_with(placeholders)

	def instantiate_with(self, parameters: Sequence[Parameter]) -> T:
		if len(parameters) != len(self.kinds):
			raise ValueError(
				f"binder expects {len(self.kinds)} parameters, got {len(parameters)}"
			)
		for kind, param in zip(self.kinds, parameters):
			if parameter_kind(param) is not kind:
				raise ValueError(f"parameter {param} does not have kind {kind.value}")
		params = tuple(parameters)

		def _instantiate(var: Any, depth: int) -> Optional[Any]:
			if not isinstance(var, BoundVar) or var.debruijn is None:
				return None
			if var.debruijn == depth:
				return shift_in(params[var.var_index], depth)
			if var.debruijn > depth:
				return BoundVar(var.kind, var.debruijn - 1, var.var_index)
			return None

		return fold_term(self.term, _instantiate, 0)

	def peek(self) -> T:
		"""The body of a binder that binds nothing."""
		return self.instantiate_with(())


__all__ = ["Binder"]
