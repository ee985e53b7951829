# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hypothesis elaboration.

`T: Eq` in the assumptions also gives us everything `Eq`'s where-clauses
promise (`T: PartialEq`, ..), transitively. Elaboration closes the
assumption list under that rule, flattening conjunctions. Hypotheses larger
than `max_size` are dropped so recursive trait bounds cannot grow the set
forever.
"""

from __future__ import annotations

import logging
from typing import List, Set

from ..types.formulas import IsImplemented
from ..types.term import term_size
from ..types.wc import All, Wc, Wcs
from .decls import Decls

logger = logging.getLogger(__name__)


def elaborate_hypotheses(decls: Decls, hypotheses: Wcs, max_size: int) -> Wcs:
	out: List[Wc] = []
	seen: Set[Wc] = set()
	worklist: List[Wc] = list(reversed(tuple(hypotheses)))
	while worklist:
		hyp = worklist.pop()
		if isinstance(hyp, All):
			worklist.extend(reversed(hyp.wcs))
			continue
		if hyp in seen:
			continue
		if term_size(hyp) > max_size:
			logger.debug("elaborate: dropping oversized hypothesis %s", hyp)
			continue
		seen.add(hyp)
		out.append(hyp)
		if isinstance(hyp, IsImplemented):
			decl = decls.trait_decl(hyp.trait_ref.trait_id)
			if decl is None or len(decl.binder.kinds) != len(hyp.trait_ref.parameters):
				continue
			implied = decl.binder.instantiate_with(hyp.trait_ref.parameters).where_clauses
			worklist.extend(reversed(implied))
	return tuple(out)


__all__ = ["elaborate_hypotheses"]
