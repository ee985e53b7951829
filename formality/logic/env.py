# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Proof environment: the variables in scope plus freshness counters.

An `Env` is immutable; every operation returns a new one. Fresh variables
take their index from `next_index` and new universes come from
`next_universe`, both of which only ever grow, so two variables created from
the same chain of environments never collide and sibling `for<..>` scopes
never share a universe.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from ..types.binder import Binder
from ..types.grammar import ExistentialVar, ParameterKind, UniversalVar, Variable


@dataclass(frozen=True)
class Env:
	variables: Tuple[Variable, ...] = ()
	coherence_mode: bool = False
	# Universe new existentials are created in.
	universe: int = 0
	next_index: int = 0
	next_universe: int = 1

	def __post_init__(self) -> None:
		indices = [var.var_index for var in self.variables]
		universes = [getattr(var, "universe", 0) for var in self.variables] + [self.universe]
		if indices and self.next_index <= max(indices):
			object.__setattr__(self, "next_index", max(indices) + 1)
		if self.next_universe <= max(universes):
			object.__setattr__(self, "next_universe", max(universes) + 1)

	def contains(self, var: object) -> bool:
		return var in self.variables

	def with_coherence_mode(self, coherence_mode: bool = True) -> "Env":
		return replace(self, coherence_mode=coherence_mode)

	def fresh_existential(self, kind: ParameterKind, universe: int | None = None) -> Tuple["Env", ExistentialVar]:
		var = ExistentialVar(kind, self.next_index, self.universe if universe is None else universe)
		env = replace(self, variables=self.variables + (var,), next_index=self.next_index + 1)
		return env, var

	def instantiate_existentially(self, binder: Binder) -> tuple:
		"""Replace the binder's variables with fresh existentials of the current universe."""
		fresh = tuple(
			ExistentialVar(kind, self.next_index + i, self.universe) for i, kind in enumerate(binder.kinds)
		)
		env = replace(
			self,
			variables=self.variables + fresh,
			next_index=self.next_index + len(fresh),
		)
		return env, fresh, binder.instantiate_with(fresh)

	def instantiate_universally(self, binder: Binder) -> tuple:
		"""Enter a new universe and replace the binder's variables with universals in it."""
		universe = self.next_universe
		fresh = tuple(UniversalVar(kind, self.next_index + i, universe) for i, kind in enumerate(binder.kinds))
		env = replace(
			self,
			variables=self.variables + fresh,
			universe=universe,
			next_index=self.next_index + len(fresh),
			next_universe=universe + 1,
		)
		return env, fresh, binder.instantiate_with(fresh)

	def exit_universe(self, universe: int) -> "Env":
		return replace(self, universe=universe)

	def without(self, variables: Iterable[Variable]) -> "Env":
		drop = set(variables)
		if not drop:
			return self
		return replace(self, variables=tuple(var for var in self.variables if var not in drop))


__all__ = ["Env"]
