# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual rendering of terms.

The output uses the surface syntax accepted by the parser wherever a term
has one. Variables render by flavour and kind: `!ty_1` (universal), `?ty_1`
(existential), `^ty_1` (open placeholder) and `^ty0_1` (bound, De Bruijn
depth 0, index 1).
"""

from __future__ import annotations

from typing import Any, Iterable

from .binder import Binder
from .formulas import (
	Equals,
	IsImplemented,
	IsLocal,
	NotImplemented,
	Outlives,
	Sub,
	WellFormed,
	WellFormedTraitRef,
)
from .grammar import (
	AliasTy,
	BoundVar,
	ConstValue,
	ExistentialVar,
	ParameterKind,
	RigidTy,
	StaticLt,
	TraitRef,
	UniversalVar,
)
from .subst import Substitution
from .wc import All, Exists, ForAll, Implies


def _join(items: Iterable[Any]) -> str:
	return ", ".join(pretty(item) for item in items)


def pretty_kinds(kinds: Iterable[ParameterKind]) -> str:
	return ", ".join(kind.value for kind in kinds)


def pretty(value: Any) -> str:
	if isinstance(value, UniversalVar):
		return f"!{value.kind.value}_{value.var_index}"
	if isinstance(value, ExistentialVar):
		return f"?{value.kind.value}_{value.var_index}"
	if isinstance(value, BoundVar):
		if value.debruijn is None:
			return f"^{value.kind.value}_{value.var_index}"
		return f"^{value.kind.value}{value.debruijn}_{value.var_index}"
	if isinstance(value, RigidTy):
		if not value.parameters:
			return value.name
		return f"{value.name}<{_join(value.parameters)}>"
	if isinstance(value, AliasTy):
		self_ty, rest = value.parameters[0], value.parameters[1:]
		trait = value.name.trait_id
		if rest:
			trait += f"<{_join(rest)}>"
		return f"<{pretty(self_ty)} as {trait}>::{value.name.item}"
	if isinstance(value, StaticLt):
		return "'static"
	if isinstance(value, ConstValue):
		return str(value.value)
	if isinstance(value, TraitRef):
		return f"{value.trait_id}({_join(value.parameters)})"
	if isinstance(value, IsImplemented):
		return pretty(value.trait_ref)
	if isinstance(value, NotImplemented):
		return f"!{pretty(value.trait_ref)}"
	if isinstance(value, WellFormedTraitRef):
		return f"@WellFormedTraitRef({pretty(value.trait_ref)})"
	if isinstance(value, IsLocal):
		return f"@IsLocal({pretty(value.trait_ref)})"
	if isinstance(value, Equals):
		return f"{pretty(value.a)} = {pretty(value.b)}"
	if isinstance(value, Sub):
		return f"{pretty(value.a)} <: {pretty(value.b)}"
	if isinstance(value, Outlives):
		return f"{pretty(value.a)} : {pretty(value.b)}"
	if isinstance(value, WellFormed):
		return f"@wf({pretty(value.parameter)})"
	if isinstance(value, ForAll):
		return f"for<{pretty_kinds(value.binder.kinds)}> {pretty(value.binder.term)}"
	if isinstance(value, Exists):
		return f"exists<{pretty_kinds(value.binder.kinds)}> {pretty(value.binder.term)}"
	if isinstance(value, Implies):
		return f"if {{{_join(value.hypotheses)}}} {pretty(value.goal)}"
	if isinstance(value, All):
		return f"{{{_join(value.wcs)}}}"
	if isinstance(value, Binder):
		if not value.kinds:
			return pretty(value.term)
		return f"<{pretty_kinds(value.kinds)}> {pretty(value.term)}"
	if isinstance(value, Substitution):
		return "{" + ", ".join(f"{pretty(var)} => {pretty(p)}" for var, p in value.bindings) + "}"
	if isinstance(value, tuple):
		return f"{{{_join(value)}}}"
	render = getattr(value, "_pretty", None)
	if render is not None:
		return render()
	return repr(value)


__all__ = ["pretty", "pretty_kinds"]
