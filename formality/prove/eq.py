# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Built-in equality: unification with occurs-check, universe checks and alias
normalization.

`prove_eq` yields every `(Env, Constraints)` under which `a = b` holds. The
substitution of the incoming constraints is applied first, so every variable
seen here is unbound.

Binding an existential `?X` of universe `n` to a value requires:

- `?X` does not occur in the value (occurs-check),
- every universal in the value lives in a universe `<= n`,
- every existential in the value of a higher universe is first lowered to a
  fresh existential of universe `n`.

An alias type `<P as Trait>::Item` equals another type either structurally
(same alias, equal parameters) or through one of its normalization rules.
Equating an existential with an alias yields both: the binding to the alias
itself and the bindings to each normalized form.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Sequence, Tuple

from ..logic.env import Env
from ..types.formulas import Equals
from ..types.grammar import (
	AliasTy,
	ExistentialVar,
	Parameter,
	RigidTy,
	UniversalVar,
	parameter_kind,
)
from ..types.term import free_variables
from ..types.wc import Wcs
from .constraints import Constraints, constrain, merge_constraints, occurs_in

if TYPE_CHECKING:
	from .solver import Stack, _Search

logger = logging.getLogger(__name__)

State = Tuple[Env, Constraints]


def prove_eq(
	search: "_Search",
	env: Env,
	assumptions: Wcs,
	a: Parameter,
	b: Parameter,
	c: Constraints,
	stack: "Stack",
) -> Iterator[State]:
	a = c.apply(a)
	b = c.apply(b)
	if a == b:
		yield env, c
		return
	if parameter_kind(a) is not parameter_kind(b):
		return

	if isinstance(a, ExistentialVar) or isinstance(b, ExistentialVar):
		var, other = _pick_binding(a, b)
		yield from bind_existential(env, var, other, c)
		if isinstance(other, AliasTy):
			yield from normalize_alias(search, env, assumptions, other, var, c, stack)
		return

	if isinstance(a, AliasTy) or isinstance(b, AliasTy):
		if isinstance(a, AliasTy) and isinstance(b, AliasTy) and a.name == b.name:
			yield from prove_all_eq(search, env, assumptions, zip(a.parameters, b.parameters), c, stack)
		if isinstance(a, AliasTy):
			yield from normalize_alias(search, env, assumptions, a, b, c, stack)
		if isinstance(b, AliasTy):
			yield from normalize_alias(search, env, assumptions, b, a, c, stack)
		return

	if isinstance(a, RigidTy) and isinstance(b, RigidTy):
		if a.name != b.name or len(a.parameters) != len(b.parameters):
			return
		yield from prove_all_eq(search, env, assumptions, zip(a.parameters, b.parameters), c, stack)


def prove_all_eq(
	search: "_Search",
	env: Env,
	assumptions: Wcs,
	pairs: Sequence[Tuple[Parameter, Parameter]],
	c: Constraints,
	stack: "Stack",
) -> Iterator[State]:
	pairs = list(pairs)
	if not pairs:
		yield env, c
		return
	(a, b), rest = pairs[0], pairs[1:]
	for env1, c1 in prove_eq(search, env, assumptions, a, b, c, stack):
		yield from prove_all_eq(search, env1, assumptions, rest, c1, stack)


def _pick_binding(a: Parameter, b: Parameter) -> Tuple[ExistentialVar, Parameter]:
	"""Bind the existential of the higher universe; on a tie the younger one."""
	if isinstance(a, ExistentialVar) and isinstance(b, ExistentialVar):
		if (b.universe, b.var_index) > (a.universe, a.var_index):
			return b, a
		return a, b
	if isinstance(a, ExistentialVar):
		return a, b
	return b, a  # type: ignore[return-value]


def bind_existential(env: Env, var: ExistentialVar, value: Parameter, c: Constraints) -> Iterator[State]:
	if occurs_in(var, value):
		logger.debug("eq: occurs-check failed for %s := %s", var, value)
		return
	for fv in free_variables(value):
		if isinstance(fv, UniversalVar) and fv.universe > var.universe:
			logger.debug("eq: %s would escape its universe through %s", fv, var)
			return
	for fv in free_variables(value):
		if isinstance(fv, ExistentialVar) and fv.universe > var.universe:
			env, lowered = env.fresh_existential(fv.kind, var.universe)
			c = merge_constraints((), c, constrain(fv, lowered)).peek()
	value = c.apply(value)
	yield env, merge_constraints((), c, constrain(var, value)).peek()


def normalize_alias(
	search: "_Search",
	env: Env,
	assumptions: Wcs,
	alias: AliasTy,
	other: Parameter,
	c: Constraints,
	stack: "Stack",
) -> Iterator[State]:
	"""Prove `alias = other` through each normalization rule for the alias."""
	for rule in search.decls.alias_eq_rules(alias.name):
		if len(rule.term.alias.parameters) != len(alias.parameters):
			continue
		env1, variables, data = env.instantiate_existentially(rule)
		goals = tuple(
			Equals(rule_param, param) for rule_param, param in zip(data.alias.parameters, alias.parameters)
		)
		goals += tuple(data.where_clauses) + (Equals(data.value, other),)
		states = search.prove_wcs(env1, c.apply(assumptions), goals, Constraints(), stack)
		yield from search.exit_scope(c, variables, states)


__all__ = ["prove_eq", "prove_all_eq", "bind_existential", "normalize_alias"]
