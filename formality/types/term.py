# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic traversal for term nodes.

Every term is a frozen dataclass deriving from `Term`. Folding and visiting
walk the dataclass fields (and tuples of fields) once, so concrete term kinds
only override the traversal where they need to: variables are the leaves the
callbacks act on, binders bump the De Bruijn depth, and substitutions keep
their keys as variables.

Folds preserve sharing: when no child changes, the original object is
returned unchanged.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, List, Optional, Set

# (variable, binder depth) -> replacement term, or None to keep the variable.
FoldFn = Callable[[Any, int], Optional[Any]]
# (variable, binder depth) -> None
VisitFn = Callable[[Any, int], None]


def fold_term(value: Any, fn: FoldFn, depth: int) -> Any:
	"""Fold `fn` over every variable reachable from `value`."""
	if isinstance(value, Term):
		return value._fold(fn, depth)
	if isinstance(value, tuple):
		items = tuple(fold_term(item, fn, depth) for item in value)
		if all(new is old for new, old in zip(items, value)):
			return value
		return items
	return value


def visit_term(value: Any, fn: VisitFn, depth: int) -> None:
	"""Call `fn` on every variable reachable from `value`."""
	if isinstance(value, Term):
		value._visit(fn, depth)
	elif isinstance(value, tuple):
		for item in value:
			visit_term(item, fn, depth)


def term_size(value: Any) -> int:
	if isinstance(value, Term):
		return value._size()
	if isinstance(value, tuple):
		return sum(term_size(item) for item in value)
	return 0


def shift_in(value: Any, amount: int) -> Any:
	"""Shift De Bruijn indices that escape `value` by `amount` binder levels."""
	if amount == 0:
		return value
	return fold_term(value, lambda var, depth: var._shifted(amount, depth), 0)


def substitute(value: Any, fn: Callable[[Any], Optional[Any]]) -> Any:
	"""
	Replace free variables (universal, existential and free placeholders).

	`fn` returns the replacement parameter or None. Replacements that land
	under binders are shifted so their own escaping indices stay correct.
	"""

	def _replace(var: Any, depth: int) -> Optional[Any]:
		if not var.is_free:
			return None
		replacement = fn(var)
		if replacement is None:
			return None
		return shift_in(replacement, depth)

	return fold_term(value, _replace, 0)


def free_variables(value: Any) -> List[Any]:
	"""Free variables of `value`, deduplicated, in first-occurrence order."""
	out: List[Any] = []
	seen: Set[Any] = set()

	def _collect(var: Any, depth: int) -> None:
		if var.is_free and var not in seen:
			seen.add(var)
			out.append(var)

	visit_term(value, _collect, 0)
	return out


class Term:
	"""Base class of all immutable term nodes."""

	def _fold(self, fn: FoldFn, depth: int) -> Any:
		changes = {}
		for f in dataclasses.fields(self):
			old = getattr(self, f.name)
			new = fold_term(old, fn, depth)
			if new is not old:
				changes[f.name] = new
		if not changes:
			return self
		return dataclasses.replace(self, **changes)

	def _visit(self, fn: VisitFn, depth: int) -> None:
		for f in dataclasses.fields(self):
			visit_term(getattr(self, f.name), fn, depth)

	def _size(self) -> int:
		return 1 + sum(term_size(getattr(self, f.name)) for f in dataclasses.fields(self))

	def substitute(self, fn: Callable[[Any], Optional[Any]]) -> Any:
		return substitute(self, fn)

	def free_variables(self) -> List[Any]:
		return free_variables(self)

	def size(self) -> int:
		return self._size()

	def __str__(self) -> str:
		from .pretty import pretty

		return pretty(self)


__all__ = [
	"FoldFn",
	"VisitFn",
	"Term",
	"fold_term",
	"visit_term",
	"term_size",
	"shift_in",
	"substitute",
	"free_variables",
]
