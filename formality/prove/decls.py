# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declarations the solver consults: traits, impls, ADTs and alias rules.

Each declaration closes its body over its generic parameters with a
`Binder`; a trait's binder also binds `Self` as its first variable. `Decls`
keeps the declarations in source order and indexes them by trait/ADT id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.diagnostics import Diagnostic
from ..core.span import Span
from ..types.binder import Binder
from ..types.grammar import AliasName, AliasTy, Parameter, TraitRef
from ..types.pretty import pretty, pretty_kinds
from ..types.term import Term
from ..types.wc import Wcs


@dataclass(frozen=True)
class TraitBoundData(Term):
	where_clauses: Wcs = ()


@dataclass(frozen=True)
class TraitDecl:
	trait_id: str
	binder: Binder[TraitBoundData]
	local: bool = False
	loc: Optional[object] = field(default=None, compare=False)

	def __str__(self) -> str:
		prefix = "local " if self.local else ""
		return (
			f"{prefix}trait {self.trait_id}<{pretty_kinds(self.binder.kinds)}> "
			f"where {pretty(self.binder.term.where_clauses)}"
		)


@dataclass(frozen=True)
class AssocValue(Term):
	item: str
	value: Parameter


@dataclass(frozen=True)
class ImplBoundData(Term):
	trait_ref: TraitRef
	where_clauses: Wcs = ()
	assoc_values: Tuple[AssocValue, ...] = ()


@dataclass(frozen=True)
class ImplDecl:
	binder: Binder[ImplBoundData]
	loc: Optional[object] = field(default=None, compare=False)

	@property
	def trait_id(self) -> str:
		return self.binder.term.trait_ref.trait_id

	def __str__(self) -> str:
		data = self.binder.term
		head = "impl"
		if self.binder.kinds:
			head += f"<{pretty_kinds(self.binder.kinds)}>"
		text = f"{head} {pretty(data.trait_ref)} where {pretty(data.where_clauses)}"
		if data.assoc_values:
			items = " ".join(f"type {av.item} = {pretty(av.value)};" for av in data.assoc_values)
			text += f" {{ {items} }}"
		return text


@dataclass(frozen=True)
class AdtBoundData(Term):
	where_clauses: Wcs = ()


@dataclass(frozen=True)
class AdtDecl:
	adt_id: str
	binder: Binder[AdtBoundData]
	local: bool = False
	loc: Optional[object] = field(default=None, compare=False)

	def __str__(self) -> str:
		prefix = "local " if self.local else ""
		return (
			f"{prefix}struct {self.adt_id}<{pretty_kinds(self.binder.kinds)}> "
			f"where {pretty(self.binder.term.where_clauses)}"
		)


@dataclass(frozen=True)
class AliasEqBoundData(Term):
	alias: AliasTy
	value: Parameter
	where_clauses: Wcs = ()


@dataclass(frozen=True)
class AliasEqDecl:
	"""`alias<..> <P as Trait>::Item = value where {..}`: a normalization rule."""

	binder: Binder[AliasEqBoundData]
	loc: Optional[object] = field(default=None, compare=False)

	def __str__(self) -> str:
		data = self.binder.term
		return (
			f"alias<{pretty_kinds(self.binder.kinds)}> {pretty(data.alias)} = {pretty(data.value)} "
			f"where {pretty(data.where_clauses)}"
		)


@dataclass
class Decls:
	trait_decls: List[TraitDecl] = field(default_factory=list)
	impl_decls: List[ImplDecl] = field(default_factory=list)
	adt_decls: List[AdtDecl] = field(default_factory=list)
	alias_eq_decls: List[AliasEqDecl] = field(default_factory=list)
	traits_by_id: Dict[str, TraitDecl] = field(default_factory=dict)
	impls_by_trait: Dict[str, List[ImplDecl]] = field(default_factory=dict)
	adts_by_id: Dict[str, AdtDecl] = field(default_factory=dict)
	diagnostics: List[Diagnostic] = field(default_factory=list)

	def trait_decl(self, trait_id: str) -> Optional[TraitDecl]:
		return self.traits_by_id.get(trait_id)

	def impls_of(self, trait_id: str) -> List[ImplDecl]:
		return self.impls_by_trait.get(trait_id, [])

	def adt_decl(self, adt_id: str) -> Optional[AdtDecl]:
		return self.adts_by_id.get(adt_id)

	def is_local_trait(self, trait_id: str) -> bool:
		decl = self.trait_decl(trait_id)
		return decl is not None and decl.local

	def is_local_adt(self, adt_id: str) -> bool:
		decl = self.adt_decl(adt_id)
		return decl is not None and decl.local

	def alias_eq_rules(self, name: AliasName) -> List[Binder[AliasEqBoundData]]:
		"""
		Normalization rules for `name`: explicit `alias` declarations plus one
		rule per impl of the alias's trait that defines the associated item.
		"""
		rules: List[Binder[AliasEqBoundData]] = [
			decl.binder for decl in self.alias_eq_decls if decl.binder.term.alias.name == name
		]
		for impl in self.impls_of(name.trait_id):
			data = impl.binder.term
			for av in data.assoc_values:
				if av.item != name.item:
					continue
				alias = AliasTy(name, data.trait_ref.parameters)
				rules.append(Binder(impl.binder.kinds, AliasEqBoundData(alias, av.value, data.where_clauses)))
		return rules


def _diag(message: str, loc: object | None) -> Diagnostic:
	return Diagnostic(message=message, code="E_DUPLICATE_DECL", phase="decls", severity="error", span=Span.from_loc(loc))


def build_decls(
	trait_decls: Sequence[TraitDecl] = (),
	impl_decls: Sequence[ImplDecl] = (),
	adt_decls: Sequence[AdtDecl] = (),
	alias_eq_decls: Sequence[AliasEqDecl] = (),
) -> Decls:
	"""Index declarations; duplicate trait or ADT ids are reported and the later one ignored."""
	decls = Decls(impl_decls=list(impl_decls), alias_eq_decls=list(alias_eq_decls))
	for tr in trait_decls:
		if tr.trait_id in decls.traits_by_id:
			decls.diagnostics.append(_diag(f"duplicate trait definition '{tr.trait_id}'", tr.loc))
			continue
		decls.trait_decls.append(tr)
		decls.traits_by_id[tr.trait_id] = tr
	for adt in adt_decls:
		if adt.adt_id in decls.adts_by_id:
			decls.diagnostics.append(_diag(f"duplicate struct definition '{adt.adt_id}'", adt.loc))
			continue
		decls.adt_decls.append(adt)
		decls.adts_by_id[adt.adt_id] = adt
	for impl in decls.impl_decls:
		decls.impls_by_trait.setdefault(impl.trait_id, []).append(impl)
	return decls


__all__ = [
	"TraitBoundData",
	"TraitDecl",
	"AssocValue",
	"ImplBoundData",
	"ImplDecl",
	"AdtBoundData",
	"AdtDecl",
	"AliasEqBoundData",
	"AliasEqDecl",
	"Decls",
	"build_decls",
]
