# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Predicates and relations: the atoms of goals and hypotheses.

Predicates talk about trait references (`Trait(T)`, `!Trait(T)`, ..);
relations talk about parameters (`A = B`, `'a : 'b`, `@wf(T)`). Both can be
"deboned" into a `Skeleton` (kind plus trait id, no parameters) and the
parameter list; the solver indexes candidates by skeleton and then unifies
parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple, Union

from .grammar import Parameter, TraitRef
from .term import Term


class Coinductive(Enum):
	NO = auto()
	YES = auto()

	def __and__(self, other: "Coinductive") -> "Coinductive":
		if self is Coinductive.YES and other is Coinductive.YES:
			return Coinductive.YES
		return Coinductive.NO


class SkeletonKind(Enum):
	IS_IMPLEMENTED = auto()
	NOT_IMPLEMENTED = auto()
	WELL_FORMED_TRAIT_REF = auto()
	IS_LOCAL = auto()
	EQUALS = auto()
	SUB = auto()
	OUTLIVES = auto()
	WELL_FORMED = auto()


_COINDUCTIVE_KINDS = frozenset({SkeletonKind.WELL_FORMED, SkeletonKind.WELL_FORMED_TRAIT_REF})


@dataclass(frozen=True)
class Skeleton:
	kind: SkeletonKind
	trait_id: Optional[str] = None

	@property
	def coinductive(self) -> Coinductive:
		return Coinductive.YES if self.kind in _COINDUCTIVE_KINDS else Coinductive.NO


class Predicate(Term):
	"""Base class of trait-ref predicates; subclasses carry one `trait_ref`."""

	skeleton_kind: SkeletonKind

	def debone(self) -> Tuple[Skeleton, Tuple[Parameter, ...]]:
		tr = self.trait_ref  # type: ignore[attr-defined]
		return Skeleton(self.skeleton_kind, tr.trait_id), tr.parameters


@dataclass(frozen=True)
class IsImplemented(Predicate):
	trait_ref: TraitRef
	skeleton_kind = SkeletonKind.IS_IMPLEMENTED


@dataclass(frozen=True)
class NotImplemented(Predicate):
	trait_ref: TraitRef
	skeleton_kind = SkeletonKind.NOT_IMPLEMENTED


@dataclass(frozen=True)
class WellFormedTraitRef(Predicate):
	trait_ref: TraitRef
	skeleton_kind = SkeletonKind.WELL_FORMED_TRAIT_REF


@dataclass(frozen=True)
class IsLocal(Predicate):
	trait_ref: TraitRef
	skeleton_kind = SkeletonKind.IS_LOCAL


class Relation(Term):
	skeleton_kind: SkeletonKind

	def parameters(self) -> Tuple[Parameter, ...]:
		raise NotImplementedError

	def debone(self) -> Tuple[Skeleton, Tuple[Parameter, ...]]:
		return Skeleton(self.skeleton_kind), self.parameters()


@dataclass(frozen=True)
class Equals(Relation):
	a: Parameter
	b: Parameter
	skeleton_kind = SkeletonKind.EQUALS

	def parameters(self) -> Tuple[Parameter, ...]:
		return (self.a, self.b)


@dataclass(frozen=True)
class Sub(Relation):
	a: Parameter
	b: Parameter
	skeleton_kind = SkeletonKind.SUB

	def parameters(self) -> Tuple[Parameter, ...]:
		return (self.a, self.b)


@dataclass(frozen=True)
class Outlives(Relation):
	a: Parameter
	b: Parameter
	skeleton_kind = SkeletonKind.OUTLIVES

	def parameters(self) -> Tuple[Parameter, ...]:
		return (self.a, self.b)


@dataclass(frozen=True)
class WellFormed(Relation):
	parameter: Parameter
	skeleton_kind = SkeletonKind.WELL_FORMED

	def parameters(self) -> Tuple[Parameter, ...]:
		return (self.parameter,)


PR = Union[Predicate, Relation]

_PREDICATE_CLASSES = {
	SkeletonKind.IS_IMPLEMENTED: IsImplemented,
	SkeletonKind.NOT_IMPLEMENTED: NotImplemented,
	SkeletonKind.WELL_FORMED_TRAIT_REF: WellFormedTraitRef,
	SkeletonKind.IS_LOCAL: IsLocal,
}
_RELATION_CLASSES = {
	SkeletonKind.EQUALS: Equals,
	SkeletonKind.SUB: Sub,
	SkeletonKind.OUTLIVES: Outlives,
	SkeletonKind.WELL_FORMED: WellFormed,
}


def rebone(skeleton: Skeleton, parameters: Tuple[Parameter, ...]) -> PR:
	"""Inverse of `debone`."""
	cls = _PREDICATE_CLASSES.get(skeleton.kind)
	if cls is not None:
		assert skeleton.trait_id is not None
		return cls(TraitRef(skeleton.trait_id, tuple(parameters)))
	return _RELATION_CLASSES[skeleton.kind](*parameters)


def debone(pr: PR) -> Tuple[Skeleton, Tuple[Parameter, ...]]:
	return pr.debone()


__all__ = [
	"Coinductive",
	"SkeletonKind",
	"Skeleton",
	"Predicate",
	"IsImplemented",
	"NotImplemented",
	"WellFormedTraitRef",
	"IsLocal",
	"Relation",
	"Equals",
	"Sub",
	"Outlives",
	"WellFormed",
	"PR",
	"rebone",
	"debone",
]
