# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Coherence: no two impls of a trait may apply to the same types.

For each pair of impls of a trait (in declaration order) we ask, in
coherence mode, whether some instantiation makes both headers equal and both
where-clause lists provable. Any answer, certain or ambiguous, means the
impls may overlap. So does an overflow: we could not show they are disjoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from ..config import SolverConfig
from ..core.diagnostics import Diagnostic
from ..core.span import Span
from ..logic.env import Env
from ..prove.decls import Decls, ImplDecl
from ..prove.solver import ProofStatus, prove
from ..types.formulas import Equals
from ..types.wc import All

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlapReport:
	trait_id: str
	impl_a: ImplDecl
	impl_b: ImplDecl

	@property
	def message(self) -> str:
		return f"impls may overlap:\n{self.impl_a}\n{self.impl_b}"

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=f"impls of trait '{self.trait_id}' may overlap",
			code="E_IMPL_OVERLAP",
			phase="coherence",
			severity="error",
			span=Span.from_loc(self.impl_b.loc),
			notes=[str(self.impl_a), str(self.impl_b)],
		)


def impls_may_overlap(decls: Decls, impl_a: ImplDecl, impl_b: ImplDecl, config: Optional[SolverConfig] = None) -> bool:
	env = Env().with_coherence_mode()
	env, _vars_a, data_a = env.instantiate_existentially(impl_a.binder)
	env, _vars_b, data_b = env.instantiate_existentially(impl_b.binder)
	params_a = data_a.trait_ref.parameters
	params_b = data_b.trait_ref.parameters
	if len(params_a) != len(params_b):
		return False
	goal = All(
		tuple(Equals(a, b) for a, b in zip(params_a, params_b))
		+ tuple(data_a.where_clauses)
		+ tuple(data_b.where_clauses)
	)
	result = prove(decls, env, (), goal, config=config)
	if result.status is ProofStatus.OVERFLOW:
		logger.debug("coherence: overflow comparing %s and %s: %s", impl_a, impl_b, result.reasons)
		return True
	return result.status is ProofStatus.PROVED


def overlapping_impls(decls: Decls, config: Optional[SolverConfig] = None) -> Iterator[OverlapReport]:
	"""Every pair of impls that may overlap, in declaration order."""
	trait_ids = []
	for impl in decls.impl_decls:
		if impl.trait_id not in trait_ids:
			trait_ids.append(impl.trait_id)
	for trait_id in trait_ids:
		impls = decls.impls_of(trait_id)
		for i, impl_a in enumerate(impls):
			for impl_b in impls[i + 1 :]:
				if impls_may_overlap(decls, impl_a, impl_b, config):
					logger.debug("coherence: %s overlaps %s", impl_a, impl_b)
					yield OverlapReport(trait_id, impl_a, impl_b)


def check_coherence(decls: Decls, config: Optional[SolverConfig] = None) -> Optional[OverlapReport]:
	return next(overlapping_impls(decls, config), None)


__all__ = ["OverlapReport", "impls_may_overlap", "overlapping_impls", "check_coherence"]
