# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Explicit conversions between related term sorts.

Upcasts (`to_*`) are lossless injections into a more general sort and raise
`TypeError` for inputs outside their domain. Downcasts (`as_*`) are partial
projections and return None when the value is not of the narrower sort.
"""

from __future__ import annotations

from typing import Any, Optional

from .formulas import PR, IsImplemented, Predicate, Relation
from .grammar import (
	VARIABLE_TYPES,
	AliasTy,
	ConstValue,
	Parameter,
	ParameterKind,
	RigidTy,
	StaticLt,
	TraitRef,
	parameter_kind,
)
from .wc import All, Exists, ForAll, Implies, Wc

_PARAMETER_TYPES = (RigidTy, AliasTy, StaticLt, ConstValue) + VARIABLE_TYPES
_WC_TYPES = (Predicate, Relation, ForAll, Exists, Implies, All)


def to_predicate(value: Any) -> Predicate:
	if isinstance(value, Predicate):
		return value
	if isinstance(value, TraitRef):
		return IsImplemented(value)
	raise TypeError(f"cannot upcast {value!r} to a predicate")


def to_pr(value: Any) -> PR:
	if isinstance(value, Relation):
		return value
	return to_predicate(value)


def to_wc(value: Any) -> Wc:
	"""Atoms and trait refs become where-clauses; a tuple becomes a conjunction."""
	if isinstance(value, _WC_TYPES):
		return value
	if isinstance(value, tuple):
		return All(tuple(to_wc(item) for item in value))
	return to_pr(value)


def _as_kind(value: Any, kind: ParameterKind) -> Optional[Parameter]:
	if not isinstance(value, _PARAMETER_TYPES):
		return None
	return value if parameter_kind(value) is kind else None


def as_ty(value: Any) -> Optional[Parameter]:
	return _as_kind(value, ParameterKind.TY)


def as_lt(value: Any) -> Optional[Parameter]:
	return _as_kind(value, ParameterKind.LT)


def as_predicate(value: Any) -> Optional[Predicate]:
	return value if isinstance(value, Predicate) else None


def as_relation(value: Any) -> Optional[Relation]:
	return value if isinstance(value, Relation) else None


def as_trait_ref(value: Any) -> Optional[TraitRef]:
	if isinstance(value, TraitRef):
		return value
	if isinstance(value, IsImplemented):
		return value.trait_ref
	return None


__all__ = [
	"to_predicate",
	"to_pr",
	"to_wc",
	"as_ty",
	"as_lt",
	"as_predicate",
	"as_relation",
	"as_trait_ref",
]
