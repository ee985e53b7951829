# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Canonical queries.

A query is canonical when its environment mentions exactly the variables the
assumptions and goal use, numbered 0.. in first-occurrence order, and the
universes of its universal variables are compressed to 1..n. Two queries that
differ only by a consistent renaming of variables and a monotone shift of
universes canonicalize to equal `Query` values; the solver relies on this for
cycle detection.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..types.binder import Binder
from ..types.formulas import Relation
from ..types.grammar import ExistentialVar, UniversalVar, Variable
from ..types.term import Term, free_variables, substitute
from ..types.wc import Wc, Wcs
from .env import Env


@dataclass(frozen=True)
class UniverseMap:
	"""Sorted `(original, canonical)` universe pairs; universe 0 maps to 0."""

	universes: Tuple[Tuple[int, int], ...] = ()

	@classmethod
	def compress(cls, universes: List[int]) -> "UniverseMap":
		ordered = sorted(set(u for u in universes if u != 0))
		return cls(tuple((u, i + 1) for i, u in enumerate(ordered)))

	def map_universe(self, universe: int) -> int:
		"""Largest canonical universe whose original is not above `universe`."""
		originals = [orig for orig, _canon in self.universes]
		pos = bisect.bisect_right(originals, universe)
		if pos == 0:
			return 0
		return self.universes[pos - 1][1]


@dataclass(frozen=True)
class Query:
	env: Env
	assumptions: Wcs
	goal: Wc

	def query_variables(self) -> Tuple[Variable, ...]:
		return self.env.variables

	def __str__(self) -> str:
		from ..types.pretty import pretty

		return f"{pretty(self.assumptions)} => {pretty(self.goal)}"


@dataclass(frozen=True)
class QueryResultBoundData(Term):
	relations: Tuple[Relation, ...] = ()


@dataclass(frozen=True)
class QueryResult:
	"""The relations an answer establishes, closed over its fresh variables."""

	binder: Binder[QueryResultBoundData]


@dataclass(frozen=True)
class CanonicalQuery:
	query: Query
	universe_map: UniverseMap
	# originals[i] is the caller's variable renamed to canonical index i.
	originals: Tuple[Variable, ...]

	def restore(self, term: Any) -> Any:
		"""Map canonical variables in `term` back to the caller's variables."""
		back: Dict[Any, Variable] = dict(zip(self.query.env.variables, self.originals))
		return substitute(term, back.get)


def canonicalize_query(env: Env, assumptions: Wcs, goal: Wc) -> CanonicalQuery:
	assumptions = tuple(assumptions)
	mentioned = free_variables((assumptions, goal))
	for var in mentioned:
		if not isinstance(var, (UniversalVar, ExistentialVar)):
			raise ValueError(f"unexpected placeholder {var} in query")
		if not env.contains(var):
			raise ValueError(f"variable {var} is not in the environment")

	universe_map = UniverseMap.compress([var.universe for var in mentioned if isinstance(var, UniversalVar)])
	renamed: Dict[Any, Variable] = {}
	for i, var in enumerate(mentioned):
		if isinstance(var, UniversalVar):
			renamed[var] = UniversalVar(var.kind, i, universe_map.map_universe(var.universe))
		else:
			renamed[var] = ExistentialVar(var.kind, i, universe_map.map_universe(var.universe))

	new_assumptions, new_goal = substitute((assumptions, goal), renamed.get)
	canon_env = Env(
		variables=tuple(renamed[var] for var in mentioned),
		coherence_mode=env.coherence_mode,
		universe=universe_map.map_universe(env.universe),
		next_index=len(mentioned),
		next_universe=len(universe_map.universes) + 1,
	)
	return CanonicalQuery(Query(canon_env, new_assumptions, new_goal), universe_map, tuple(mentioned))


def canonicalize(env: Env, assumptions: Wcs, goal: Wc) -> Query:
	return canonicalize_query(env, assumptions, goal).query


def extract_query_result(answer: Binder) -> QueryResult:
	"""Turn a `Binder[Constraints]` answer into the relations it establishes."""
	return QueryResult(Binder(answer.kinds, QueryResultBoundData(answer.term.as_relations())))


__all__ = [
	"UniverseMap",
	"Query",
	"QueryResultBoundData",
	"QueryResult",
	"CanonicalQuery",
	"canonicalize_query",
	"canonicalize",
	"extract_query_result",
]
