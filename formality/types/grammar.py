# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core term grammar: variables, types, lifetimes, consts and trait references.

Variables come in three flavours:

- `UniversalVar`: rigid placeholder introduced by a `for<..>` goal,
- `ExistentialVar`: inference variable the solver may bind,
- `BoundVar`: De Bruijn reference into an enclosing `Binder`. A bound variable
  with `debruijn=None` is a free placeholder produced by `Binder.open`.

Universal and existential variables carry the universe they live in; an
existential may only be bound to terms whose universals are visible from its
own universe.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .term import FoldFn, Term, VisitFn


class ParameterKind(Enum):
	TY = "ty"
	LT = "lt"
	CONST = "const"


@dataclass(frozen=True)
class UniversalVar(Term):
	kind: ParameterKind
	var_index: int
	universe: int

	is_free = True

	def _fold(self, fn: FoldFn, depth: int) -> "Parameter":
		new = fn(self, depth)
		return self if new is None else new

	def _visit(self, fn: VisitFn, depth: int) -> None:
		fn(self, depth)

	def _size(self) -> int:
		return 1

	def _shifted(self, amount: int, depth: int) -> None:
		return None


@dataclass(frozen=True)
class ExistentialVar(Term):
	kind: ParameterKind
	var_index: int
	universe: int

	is_free = True

	def _fold(self, fn: FoldFn, depth: int) -> "Parameter":
		new = fn(self, depth)
		return self if new is None else new

	def _visit(self, fn: VisitFn, depth: int) -> None:
		fn(self, depth)

	def _size(self) -> int:
		return 1

	def _shifted(self, amount: int, depth: int) -> None:
		return None


@dataclass(frozen=True)
class BoundVar(Term):
	kind: ParameterKind
	debruijn: Optional[int]
	var_index: int

	@property
	def is_free(self) -> bool:
		return self.debruijn is None

	def _fold(self, fn: FoldFn, depth: int) -> "Parameter":
		new = fn(self, depth)
		return self if new is None else new

	def _visit(self, fn: VisitFn, depth: int) -> None:
		fn(self, depth)

	def _size(self) -> int:
		return 1

	def _shifted(self, amount: int, depth: int) -> Optional["BoundVar"]:
		if self.debruijn is None or self.debruijn < depth:
			return None
		return BoundVar(self.kind, self.debruijn + amount, self.var_index)


Variable = Union[UniversalVar, ExistentialVar, BoundVar]
VARIABLE_TYPES = (UniversalVar, ExistentialVar, BoundVar)


@dataclass(frozen=True)
class RigidTy(Term):
	"""A type constructor applied to parameters: ADTs and scalars like `u32`."""

	name: str
	parameters: Tuple["Parameter", ...] = ()


@dataclass(frozen=True)
class AliasName:
	trait_id: str
	item: str


@dataclass(frozen=True)
class AliasTy(Term):
	"""`<P0 as Trait<P1..>>::item`; parameters are the trait ref's parameters."""

	name: AliasName
	parameters: Tuple["Parameter", ...] = ()


@dataclass(frozen=True)
class StaticLt(Term):
	pass


STATIC = StaticLt()


@dataclass(frozen=True)
class ConstValue(Term):
	value: int


Ty = Union[RigidTy, AliasTy, Variable]
Lt = Union[StaticLt, Variable]
Const = Union[ConstValue, Variable]
Parameter = Union[RigidTy, AliasTy, StaticLt, ConstValue, UniversalVar, ExistentialVar, BoundVar]


@dataclass(frozen=True)
class TraitRef(Term):
	"""`Trait(Self, P1, ..)`; the first parameter is the self type."""

	trait_id: str
	parameters: Tuple[Parameter, ...] = ()


def parameter_kind(param: Parameter) -> ParameterKind:
	if isinstance(param, VARIABLE_TYPES):
		return param.kind
	if isinstance(param, (RigidTy, AliasTy)):
		return ParameterKind.TY
	if isinstance(param, StaticLt):
		return ParameterKind.LT
	if isinstance(param, ConstValue):
		return ParameterKind.CONST
	raise TypeError(f"not a parameter: {param!r}")


def rigid(name: str, *parameters: Parameter) -> RigidTy:
	return RigidTy(name, tuple(parameters))


__all__ = [
	"ParameterKind",
	"UniversalVar",
	"ExistentialVar",
	"BoundVar",
	"Variable",
	"VARIABLE_TYPES",
	"RigidTy",
	"AliasName",
	"AliasTy",
	"StaticLt",
	"STATIC",
	"ConstValue",
	"Ty",
	"Lt",
	"Const",
	"Parameter",
	"TraitRef",
	"parameter_kind",
	"rigid",
]
