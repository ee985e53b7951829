# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Goal-directed proof search.

The search is depth-first and generator based: every step yields each
`(Env, Constraints)` under which its goal holds, and callers chain the
yields of conjuncts. Nothing is mutated in place, so sibling candidates all
start from the same environment and constraints.

Atomic goals are canonicalized and checked against the chain of ancestor
goals before any candidate is tried. Meeting an ancestor again closes the
branch: as proven when every goal on the cycle is coinductive
(well-formedness), as failed otherwise. Goals that grow past
`SolverConfig.max_term_size`, or nest deeper than `max_depth`, abort the
whole query with an overflow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..config import SolverConfig
from ..logic.env import Env
from ..logic.query import Query, canonicalize
from ..types.binder import Binder
from ..types.formulas import (
	PR,
	Coinductive,
	Equals,
	IsImplemented,
	IsLocal,
	NotImplemented,
	Outlives,
	Predicate,
	Relation,
	Sub,
	WellFormed,
	WellFormedTraitRef,
)
from ..types.grammar import (
	STATIC,
	AliasTy,
	BoundVar,
	ExistentialVar,
	ParameterKind,
	RigidTy,
	TraitRef,
	UniversalVar,
	Variable,
	parameter_kind,
)
from ..types.term import free_variables, term_size
from ..types.wc import All, Exists, ForAll, Implies, Wc, Wcs
from .constraints import Constraints, merge_constraints, sorted_by
from .decls import Decls
from .elaborate import elaborate_hypotheses
from .eq import prove_all_eq, prove_eq

logger = logging.getLogger(__name__)

State = Tuple[Env, Constraints]
# Ancestor goals, outermost first, with whether each one is coinductive.
Stack = Tuple[Tuple[Query, Coinductive], ...]


class ProofStatus(Enum):
	PROVED = auto()
	UNPROVABLE = auto()
	OVERFLOW = auto()


@dataclass
class ProofResult:
	status: ProofStatus
	answers: FrozenSet[Binder[Constraints]] = frozenset()
	reasons: List[str] = field(default_factory=list)

	@property
	def ambiguous(self) -> bool:
		"""True when some answer is only possibly true."""
		return any(not answer.term.known_true for answer in self.answers)


class ProofOverflow(RuntimeError):
	def __init__(self, message: str, *, goal: object) -> None:
		super().__init__(message)
		self.goal = goal


class _Search:
	def __init__(self, decls: Decls, config: SolverConfig) -> None:
		self.decls = decls
		self.config = config

	# --- connectives ---------------------------------------------------

	def prove_wcs(self, env: Env, assumptions: Wcs, wcs: Sequence[Wc], c: Constraints, stack: Stack) -> Iterator[State]:
		if not wcs:
			yield env, c
			return
		first, rest = wcs[0], tuple(wcs[1:])
		for env1, c1 in self.prove_wc(env, assumptions, first, c, stack):
			yield from self.prove_wcs(env1, assumptions, rest, c1, stack)

	def prove_wc(self, env: Env, assumptions: Wcs, wc: Wc, c: Constraints, stack: Stack) -> Iterator[State]:
		wc = c.apply(wc)
		assumptions = c.apply(assumptions)
		if isinstance(wc, (Predicate, Relation)):
			yield from self.prove_pr(env, assumptions, wc, c, stack)
		elif isinstance(wc, All):
			yield from self.prove_wcs(env, assumptions, wc.wcs, c, stack)
		elif isinstance(wc, ForAll):
			env1, _universals, body = env.instantiate_universally(wc.binder)
			states = self.prove_wc(env1, assumptions, body, Constraints(), stack)
			yield from self.exit_universe(env, c, states)
		elif isinstance(wc, Exists):
			env1, existentials, body = env.instantiate_existentially(wc.binder)
			states = self.prove_wc(env1, assumptions, body, Constraints(), stack)
			yield from self.exit_scope(c, existentials, states)
		elif isinstance(wc, Implies):
			extended = elaborate_hypotheses(
				self.decls, tuple(assumptions) + tuple(wc.hypotheses), self.config.max_term_size
			)
			yield from self.prove_wc(env, extended, wc.goal, c, stack)
		else:
			raise AssertionError(f"unexpected goal {wc!r} (solver bug)")

	def exit_scope(self, c: Constraints, variables: Sequence[Variable], states: Iterable[State]) -> Iterator[State]:
		"""
		Combine the answers of a nested scope with `c`.

		`states` were proven starting from empty constraints; the scope's own
		`variables` are dropped from each answer and those still mentioned by
		it are replaced with fresh existentials of the same universe.
		"""
		variables = tuple(variables)
		for env1, delta in states:
			merged = merge_constraints(variables, c, Binder.dummy(delta))
			env2, _fresh, c2 = env1.without(variables).instantiate_existentially(merged)
			yield env2, c2

	def exit_universe(self, outer: Env, c: Constraints, states: Iterable[State]) -> Iterator[State]:
		"""
		Leave a `for<..>` scope entered from `outer`.

		Every variable created inside the scope is hidden like an `exists`
		variable. An answer survives only if the bindings of `outer`'s
		variables mention none of the scope's universals.
		"""
		for env1, delta in states:
			scoped = tuple(var for var in env1.variables if not outer.contains(var))
			visible = delta.substitution.without(var for var in delta.substitution.domain() if var in scoped)
			escaped = [
				var for var in free_variables(visible)
				if isinstance(var, UniversalVar) and not outer.contains(var)
			]
			if escaped:
				logger.debug("forall: answer %s leaks placeholders %s", delta, escaped)
				continue
			merged = merge_constraints(scoped, c, Binder.dummy(delta))
			env2 = env1.without(scoped).exit_universe(outer.universe)
			env3, _fresh, c2 = env2.instantiate_existentially(merged)
			yield env3, c2

	# --- atoms ---------------------------------------------------------

	def prove_pr(self, env: Env, assumptions: Wcs, pr: PR, c: Constraints, stack: Stack) -> Iterator[State]:
		pr = c.apply(pr)
		assumptions = c.apply(assumptions)
		size = term_size(pr)
		if size > self.config.max_term_size:
			logger.debug("overflow: goal %s has size %d", pr, size)
			raise ProofOverflow(
				f"goal `{pr}` exceeds the maximum term size ({size} > {self.config.max_term_size})", goal=pr
			)
		if len(stack) >= self.config.max_depth:
			logger.debug("overflow: goal %s at depth %d", pr, len(stack))
			raise ProofOverflow(f"goal `{pr}` exceeds the maximum proof depth ({self.config.max_depth})", goal=pr)

		query = canonicalize(env, assumptions, pr)
		skeleton, _params = pr.debone()
		coinductive = skeleton.coinductive
		for i, (ancestor, _flag) in enumerate(stack):
			if ancestor != query:
				continue
			cycle = coinductive
			for _q, flag in stack[i:]:
				cycle = cycle & flag
			if cycle is Coinductive.YES:
				logger.debug("cycle: %s closed coinductively", pr)
				yield env, c
			else:
				logger.debug("cycle: %s is inductive, failing", pr)
			return

		stack = stack + ((query, coinductive),)
		logger.debug("prove: %s (depth %d)", pr, len(stack))
		for hyp in assumptions:
			yield from self.match_hypothesis(env, assumptions, hyp, pr, c, stack)
		yield from self.prove_builtin(env, assumptions, pr, c, stack)

	def match_hypothesis(self, env: Env, assumptions: Wcs, hyp: Wc, pr: PR, c: Constraints, stack: Stack) -> Iterator[State]:
		if isinstance(hyp, (Predicate, Relation)):
			hyp_skeleton, hyp_params = hyp.debone()
			goal_skeleton, goal_params = pr.debone()
			if hyp_skeleton != goal_skeleton or len(hyp_params) != len(goal_params):
				return
			yield from prove_all_eq(self, env, assumptions, tuple(zip(goal_params, hyp_params)), c, stack)
			if isinstance(hyp, Equals):
				swapped = tuple(zip(goal_params, reversed(hyp_params)))
				yield from prove_all_eq(self, env, assumptions, swapped, c, stack)
		elif isinstance(hyp, ForAll):
			env1, existentials, body = env.instantiate_existentially(hyp.binder)
			states = self.match_hypothesis(env1, assumptions, body, pr, Constraints(), stack)
			yield from self.exit_scope(c, existentials, states)
		elif isinstance(hyp, Implies):
			for env1, c1 in self.match_hypothesis(env, assumptions, hyp.goal, pr, c, stack):
				yield from self.prove_wcs(env1, assumptions, hyp.hypotheses, c1, stack)
		elif isinstance(hyp, All):
			for wc in hyp.wcs:
				yield from self.match_hypothesis(env, assumptions, wc, pr, c, stack)
		# `exists` hypotheses give nothing to match against.

	# --- built-in rules ------------------------------------------------

	def prove_builtin(self, env: Env, assumptions: Wcs, pr: PR, c: Constraints, stack: Stack) -> Iterator[State]:
		if isinstance(pr, IsImplemented):
			yield from self.prove_is_implemented(env, assumptions, pr.trait_ref, c, stack)
		elif isinstance(pr, NotImplemented):
			yield from self.prove_not_implemented(env, assumptions, pr.trait_ref, c, stack)
		elif isinstance(pr, WellFormedTraitRef):
			yield from self.prove_wf_trait_ref(env, assumptions, pr.trait_ref, c, stack)
		elif isinstance(pr, IsLocal):
			yield from self.prove_is_local(env, pr.trait_ref, c)
		elif isinstance(pr, (Equals, Sub)):
			yield from prove_eq(self, env, assumptions, pr.a, pr.b, c, stack)
		elif isinstance(pr, Outlives):
			yield from self.prove_outlives(env, assumptions, pr, c, stack)
		elif isinstance(pr, WellFormed):
			yield from self.prove_well_formed(env, assumptions, pr.parameter, c, stack)
		else:
			raise AssertionError(f"unexpected atom {pr!r} (solver bug)")

	def prove_is_implemented(self, env: Env, assumptions: Wcs, trait_ref: TraitRef, c: Constraints, stack: Stack) -> Iterator[State]:
		for impl in self.decls.impls_of(trait_ref.trait_id):
			header = impl.binder.term.trait_ref
			if len(header.parameters) != len(trait_ref.parameters):
				continue
			env1, existentials, data = env.instantiate_existentially(impl.binder)
			logger.debug("candidate: %s for %s", impl, trait_ref)
			states = self._prove_impl(env1, assumptions, trait_ref, data, stack)
			yield from self.exit_scope(c, existentials, states)

	def _prove_impl(self, env: Env, assumptions: Wcs, trait_ref: TraitRef, data, stack: Stack) -> Iterator[State]:
		pairs = tuple(zip(trait_ref.parameters, data.trait_ref.parameters))
		for env1, c1 in prove_all_eq(self, env, assumptions, pairs, Constraints(), stack):
			yield from self.prove_wcs(env1, assumptions, data.where_clauses, c1, stack)

	def prove_not_implemented(self, env: Env, assumptions: Wcs, trait_ref: TraitRef, c: Constraints, stack: Stack) -> Iterator[State]:
		if any(isinstance(var, ExistentialVar) for var in free_variables(trait_ref)):
			yield env, c.ambiguous()
			return
		# A universal stands for every type, some of which may implement the trait.
		maybe = any(isinstance(var, UniversalVar) for var in free_variables(trait_ref))
		for _env, found in self.prove_pr(env, assumptions, IsImplemented(trait_ref), Constraints(), stack):
			if found.known_true:
				return
			maybe = True
		if maybe:
			yield env, c.ambiguous()
			return
		if env.coherence_mode and self.is_local(trait_ref) is not True:
			# Another crate may still add an impl.
			yield env, c.ambiguous()
			return
		yield env, c

	def prove_wf_trait_ref(self, env: Env, assumptions: Wcs, trait_ref: TraitRef, c: Constraints, stack: Stack) -> Iterator[State]:
		decl = self.decls.trait_decl(trait_ref.trait_id)
		if decl is None or len(decl.binder.kinds) != len(trait_ref.parameters):
			return
		goals: Tuple[Wc, ...] = tuple(WellFormed(p) for p in trait_ref.parameters)
		goals += tuple(decl.binder.instantiate_with(trait_ref.parameters).where_clauses)
		yield from self.prove_wcs(env, assumptions, goals, c, stack)

	def is_local(self, trait_ref: TraitRef) -> Optional[bool]:
		"""True/False when decided, None when an inference variable could go either way."""
		if self.decls.is_local_trait(trait_ref.trait_id):
			return True
		undecided = False
		for param in trait_ref.parameters:
			if isinstance(param, RigidTy) and self.decls.is_local_adt(param.name):
				return True
			if isinstance(param, ExistentialVar):
				undecided = True
		return None if undecided else False

	def prove_is_local(self, env: Env, trait_ref: TraitRef, c: Constraints) -> Iterator[State]:
		local = self.is_local(trait_ref)
		if local is True:
			yield env, c
		elif local is None:
			yield env, c.ambiguous()

	def prove_outlives(self, env: Env, assumptions: Wcs, pr: Outlives, c: Constraints, stack: Stack) -> Iterator[State]:
		a, b = pr.a, pr.b
		if a == b or a == STATIC:
			yield env, c
			return
		if isinstance(a, (RigidTy, AliasTy)):
			goals = tuple(
				Outlives(p, b) for p in a.parameters if parameter_kind(p) is not ParameterKind.CONST
			)
			yield from self.prove_wcs(env, assumptions, goals, c, stack)
			return
		if isinstance(a, ExistentialVar) or isinstance(b, ExistentialVar):
			yield env, c.ambiguous()
		# Otherwise only the hypotheses can tell.

	def prove_well_formed(self, env: Env, assumptions: Wcs, param, c: Constraints, stack: Stack) -> Iterator[State]:
		if isinstance(param, RigidTy):
			goals: Tuple[Wc, ...] = tuple(WellFormed(p) for p in param.parameters)
			adt = self.decls.adt_decl(param.name)
			if adt is not None:
				if len(adt.binder.kinds) != len(param.parameters):
					return
				goals += tuple(adt.binder.instantiate_with(param.parameters).where_clauses)
			yield from self.prove_wcs(env, assumptions, goals, c, stack)
		elif isinstance(param, AliasTy):
			goals = tuple(WellFormed(p) for p in param.parameters)
			goals += (IsImplemented(TraitRef(param.name.trait_id, param.parameters)),)
			yield from self.prove_wcs(env, assumptions, goals, c, stack)
		elif isinstance(param, ExistentialVar):
			yield env, c.ambiguous()
		elif isinstance(param, BoundVar):
			raise AssertionError(f"unexpected bound variable {param} in goal (solver bug)")
		else:
			# Universals, lifetimes and consts.
			yield env, c


def _check_query_variables(env: Env, assumptions: Wcs, goal: Wc) -> None:
	for var in free_variables((assumptions, goal)):
		if isinstance(var, BoundVar):
			raise ValueError(f"unexpected placeholder {var} in query")
		if not env.contains(var):
			raise ValueError(f"variable {var} is not in the environment")


def _canonical_answer(env: Env, c: Constraints) -> Binder[Constraints]:
	"""
	Restrict `c` to the query's variables, ordered as in `env`, and close it
	over the fresh variables the answer mentions.
	"""
	kept = Constraints(c.known_true, c.substitution.without(
		var for var in c.substitution.domain() if not env.contains(var)
	))
	kept = sorted_by(kept, env.variables)
	fresh = [var for var in free_variables(kept) if not env.contains(var)]
	return merge_constraints(fresh, Constraints(), Binder.dummy(kept))


def prove(
	decls: Decls,
	env: Env,
	assumptions: Wcs,
	goal: Wc,
	*,
	config: Optional[SolverConfig] = None,
) -> ProofResult:
	"""
	Prove `goal` in `env` under `assumptions`.

	Each answer is a `Binder[Constraints]` over the variables of `env`; its
	bound variables are inference variables the proof created but left
	unconstrained. An answer with `known_true=False` only possibly holds.
	"""
	config = config or SolverConfig()
	assumptions = tuple(assumptions)
	_check_query_variables(env, assumptions, goal)
	search = _Search(decls, config)
	hypotheses = elaborate_hypotheses(decls, assumptions, config.max_term_size)
	answers = set()
	try:
		for _env, c in search.prove_wc(env, hypotheses, goal, Constraints(), ()):
			answers.add(_canonical_answer(env, c))
	except ProofOverflow as exc:
		return ProofResult(status=ProofStatus.OVERFLOW, reasons=[str(exc)])
	if not answers:
		return ProofResult(status=ProofStatus.UNPROVABLE, reasons=[f"no proof of `{goal}`"])
	return ProofResult(status=ProofStatus.PROVED, answers=frozenset(answers))


__all__ = [
	"ProofStatus",
	"ProofResult",
	"ProofOverflow",
	"State",
	"Stack",
	"prove",
]
