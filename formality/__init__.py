# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
A formal model of trait resolution.

Declarations (traits, impls, ADTs and alias rules) are parsed into `Decls`;
`prove` decides goals against them and `check_coherence` looks for impls
that may overlap.
"""

from .coherence import OverlapReport, check_coherence, overlapping_impls
from .config import SolverConfig
from .logic import Env, Query, canonicalize
from .parser import parse_program, parse_query, parse_wc, parse_wcs
from .prove import Constraints, Decls, ProofResult, ProofStatus, merge_constraints, prove
from .types import pretty

__all__ = [
	"OverlapReport",
	"check_coherence",
	"overlapping_impls",
	"SolverConfig",
	"Env",
	"Query",
	"canonicalize",
	"parse_program",
	"parse_query",
	"parse_wc",
	"parse_wcs",
	"Constraints",
	"Decls",
	"ProofResult",
	"ProofStatus",
	"merge_constraints",
	"prove",
	"pretty",
]
