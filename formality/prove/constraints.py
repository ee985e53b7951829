# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Constraint sets produced by the solver.

A `Constraints` value is a substitution for inference variables plus a
`known_true` flag; `known_true=False` marks an ambiguous answer ("might hold").
The substitution is kept fully applied: no variable of its domain occurs in
the free variables of any value in its range. Folds that would break this
raise `AssertionError`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Sequence, Tuple

from ..types.binder import Binder
from ..types.formulas import Equals
from ..types.grammar import BoundVar, ExistentialVar, Parameter, Variable
from ..types.pretty import pretty
from ..types.subst import Substitution
from ..types.term import FoldFn, Term, VisitFn, free_variables, visit_term


@dataclass(frozen=True)
class Constraints(Term):
	known_true: bool = True
	substitution: Substitution = Substitution()

	def _fold(self, fn: FoldFn, depth: int) -> "Constraints":
		new = self.substitution._fold(fn, depth)
		if new is self.substitution:
			return self
		c = Constraints(self.known_true, new)
		if not c.is_valid():
			raise AssertionError(f"folding `{self}` yielded invalid constraint set `{c}` (solver bug)")
		return c

	def _visit(self, fn: VisitFn, depth: int) -> None:
		visit_term(self.substitution, fn, depth)

	def _size(self) -> int:
		return self.substitution._size()

	def is_valid(self) -> bool:
		domain = set(self.substitution.domain())
		if not domain:
			return True
		return not any(
			var in domain for value in self.substitution.range() for var in free_variables(value)
		)

	def as_relations(self) -> Tuple[Equals, ...]:
		if not self.is_valid():
			raise AssertionError(f"invalid constraint set `{self}` (solver bug)")
		return tuple(Equals(var, value) for var, value in self.substitution.bindings)

	def ambiguous(self) -> "Constraints":
		return replace(self, known_true=False)

	def apply(self, term: Any) -> Any:
		return self.substitution.apply(term)

	def _pretty(self) -> str:
		text = pretty(self.substitution)
		return text if self.known_true else f"ambiguous {text}"


def occurs_in(var: Variable, term: Any) -> bool:
	return var in free_variables(term)


def _max_placeholder(term: Any) -> int:
	best = -1

	def _see(var: Any, depth: int) -> None:
		nonlocal best
		if isinstance(var, BoundVar) and var.debruijn is None:
			best = max(best, var.var_index)

	visit_term(term, _see, 0)
	return best


def merge_constraints(
	existentials: Sequence[Variable],
	c0: Constraints,
	c1: Binder[Constraints],
) -> Binder[Constraints]:
	"""
	Compose `c0` with the answer `c1` of a nested proof.

	`c1`'s substitution is applied to `c0`, the two substitutions are
	concatenated and bindings for `existentials` (variables the nested scope
	introduced and no longer needs) are dropped. The result is closed over
	`c1`'s own bound variables and the existentials still mentioned.
	"""
	existentials = tuple(existentials)
	if not c0.is_valid():
		raise AssertionError(f"merge: invalid outer constraints `{c0}` (solver bug)")
	first = 1 + max(_max_placeholder((c0, existentials)), _max_placeholder(c1))
	c1_vars, c1_open = c1.open(first)
	if not c1_open.is_valid():
		raise AssertionError(f"merge: invalid inner constraints `{c1_open}` (solver bug)")
	c0_domain = set(c0.substitution.domain())
	if c0_domain & set(c1_open.substitution.domain()):
		raise AssertionError(f"merge: `{c0}` and `{c1_open}` bind the same variable (solver bug)")
	if any(var in c0_domain for var in free_variables(c1_open.substitution)):
		raise AssertionError(f"merge: `{c1_open}` mentions a variable bound by `{c0}` (solver bug)")

	c0 = c1_open.substitution.apply(c0)
	drop = set(existentials)
	bindings = tuple(
		(var, value)
		for var, value in c0.substitution.bindings + c1_open.substitution.bindings
		if var not in drop
	)
	merged = Constraints(c0.known_true and c1_open.known_true, Substitution(bindings))
	return Binder.mentioned(c1_vars + existentials, merged)


def constrain(var: ExistentialVar, value: Parameter) -> Binder[Constraints]:
	"""The single binding `var := value`; raises when it fails the occurs-check."""
	c = Constraints(True, Substitution(((var, value),)))
	if not c.is_valid():
		raise AssertionError(f"cannot bind {pretty(var)} to {pretty(value)}: occurs-check (solver bug)")
	return Binder.dummy(c)


def no_constraints() -> Binder[Constraints]:
	return Binder.dummy(Constraints())


def sorted_by(c: Constraints, order: Iterable[Variable]) -> Constraints:
	"""Reorder the bindings of `c` following `order`; other keys keep their position at the end."""
	rank = {var: i for i, var in enumerate(order)}
	bindings: List[Tuple[Variable, Parameter]] = sorted(
		c.substitution.bindings, key=lambda item: rank.get(item[0], len(rank))
	)
	return Constraints(c.known_true, Substitution(tuple(bindings)))


__all__ = [
	"Constraints",
	"occurs_in",
	"merge_constraints",
	"constrain",
	"no_constraints",
	"sorted_by",
]
