# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Term language: parameters, binders, substitutions, formulas and goals."""

from .binder import Binder
from .formulas import (
	PR,
	Coinductive,
	Equals,
	IsImplemented,
	IsLocal,
	NotImplemented,
	Outlives,
	Predicate,
	Relation,
	Skeleton,
	SkeletonKind,
	Sub,
	WellFormed,
	WellFormedTraitRef,
	debone,
	rebone,
)
from .grammar import (
	STATIC,
	VARIABLE_TYPES,
	AliasName,
	AliasTy,
	BoundVar,
	ConstValue,
	ExistentialVar,
	Parameter,
	ParameterKind,
	RigidTy,
	StaticLt,
	TraitRef,
	UniversalVar,
	Variable,
	parameter_kind,
	rigid,
)
from .pretty import pretty
from .subst import Substitution
from .term import Term, free_variables, shift_in, substitute
from .wc import All, Exists, ForAll, Implies, Wc, Wcs, all_of

__all__ = [
	"Binder",
	"PR",
	"Coinductive",
	"Equals",
	"IsImplemented",
	"IsLocal",
	"NotImplemented",
	"Outlives",
	"Predicate",
	"Relation",
	"Skeleton",
	"SkeletonKind",
	"Sub",
	"WellFormed",
	"WellFormedTraitRef",
	"debone",
	"rebone",
	"STATIC",
	"VARIABLE_TYPES",
	"AliasName",
	"AliasTy",
	"BoundVar",
	"ConstValue",
	"ExistentialVar",
	"Parameter",
	"ParameterKind",
	"RigidTy",
	"StaticLt",
	"TraitRef",
	"UniversalVar",
	"Variable",
	"parameter_kind",
	"rigid",
	"pretty",
	"Substitution",
	"Term",
	"free_variables",
	"shift_in",
	"substitute",
	"All",
	"Exists",
	"ForAll",
	"Implies",
	"Wc",
	"Wcs",
	"all_of",
]
