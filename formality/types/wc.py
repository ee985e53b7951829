# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Where-clauses and goals.

A where-clause is an atom (`PR`) or one of the connectives below. The same
forms are used as goals and as hypotheses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .binder import Binder
from .formulas import PR
from .term import Term


@dataclass(frozen=True)
class ForAll(Term):
	binder: Binder["Wc"]


@dataclass(frozen=True)
class Exists(Term):
	binder: Binder["Wc"]


@dataclass(frozen=True)
class Implies(Term):
	hypotheses: Tuple["Wc", ...]
	goal: "Wc"


@dataclass(frozen=True)
class All(Term):
	wcs: Tuple["Wc", ...] = ()


Wc = Union[PR, ForAll, Exists, Implies, All]
Wcs = Tuple[Wc, ...]


def all_of(*wcs: Wc) -> Wc:
	if len(wcs) == 1:
		return wcs[0]
	return All(tuple(wcs))


__all__ = ["ForAll", "Exists", "Implies", "All", "Wc", "Wcs", "all_of"]
