# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Constraints, declarations and the proof search."""

from .constraints import Constraints, constrain, merge_constraints, no_constraints, occurs_in
from .decls import (
	AdtBoundData,
	AdtDecl,
	AliasEqBoundData,
	AliasEqDecl,
	AssocValue,
	Decls,
	ImplBoundData,
	ImplDecl,
	TraitBoundData,
	TraitDecl,
	build_decls,
)
from .elaborate import elaborate_hypotheses
from .solver import ProofOverflow, ProofResult, ProofStatus, prove

__all__ = [
	"Constraints",
	"constrain",
	"merge_constraints",
	"no_constraints",
	"occurs_in",
	"AdtBoundData",
	"AdtDecl",
	"AliasEqBoundData",
	"AliasEqDecl",
	"AssocValue",
	"Decls",
	"ImplBoundData",
	"ImplDecl",
	"TraitBoundData",
	"TraitDecl",
	"build_decls",
	"elaborate_hypotheses",
	"ProofOverflow",
	"ProofResult",
	"ProofStatus",
	"prove",
]
