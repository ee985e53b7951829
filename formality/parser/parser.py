# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser for declarations, where-clauses and queries.

The lark grammar lives beside this module (`grammar.lark`). Trees are turned
into terms by the `_build_*` functions below. Names bound by `<..>`, `for`
and `exists` are resolved to De Bruijn `BoundVar`s: the innermost binder is
depth 0. Any other name is a rigid type.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree

from ..logic.env import Env
from ..prove.decls import (
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
from ..types.binder import Binder
from ..types.formulas import (
	Equals,
	IsImplemented,
	IsLocal,
	NotImplemented,
	Outlives,
	Sub,
	WellFormed,
	WellFormedTraitRef,
)
from ..types.grammar import (
	STATIC,
	AliasName,
	AliasTy,
	BoundVar,
	ConstValue,
	Parameter,
	ParameterKind,
	RigidTy,
	TraitRef,
)
from ..types.term import Term
from ..types.wc import All, Exists, ForAll, Implies, Wc, Wcs

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start=["program", "wc_start", "wcs_start", "query"],
	propagate_positions=True,
	maybe_placeholders=False,
)

# Innermost binder first; each frame lists (name, kind) in binding order.
Frame = Tuple[Tuple[str, ParameterKind], ...]
Scope = Tuple[Frame, ...]

_KINDS = {
	"kind_ty": ParameterKind.TY,
	"kind_lt": ParameterKind.LT,
	"kind_const": ParameterKind.CONST,
}


@dataclass(frozen=True)
class Located:
	line: int
	column: int


class ProgramParseError(ValueError):
	"""
	User-facing error found while building terms from a parse tree
	(unknown lifetime, misplaced alias, duplicate parameter name, ..).
	Syntax errors surface as lark's `UnexpectedInput` instead.
	"""

	def __init__(self, message: str, *, loc: Optional[Located]) -> None:
		super().__init__(message)
		self.loc = loc


@dataclass(frozen=True)
class QueryBody(Term):
	assumptions: Wcs = ()
	goals: Wcs = ()


@dataclass(frozen=True)
class ParsedQuery:
	"""`exists<..> {assumptions} => {goals}` with the exists variables still bound."""

	binder: Binder[QueryBody]

	def instantiate(self, env: Optional[Env] = None) -> Tuple[Env, Wcs, Wcs]:
		env, _vars, body = (env or Env()).instantiate_existentially(self.binder)
		return env, body.assumptions, body.goals


def parse_program(source: str) -> Decls:
	tree = _PARSER.parse(source, start="program")
	return _build_program(tree)


def parse_wc(source: str) -> Wc:
	tree = _PARSER.parse(source, start="wc_start")
	return _build_wc(tree.children[0], ())


def parse_wcs(source: str) -> Wcs:
	tree = _PARSER.parse(source, start="wcs_start")
	if not tree.children:
		return ()
	return _build_wcs(tree.children[0], ())


def parse_query(source: str) -> ParsedQuery:
	tree = _PARSER.parse(source, start="query")
	return _build_query(tree)


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	line = getattr(meta, "line", None)
	if line is None:
		return None
	return Located(line=line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree, name: str) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and _name(c) == name]


def _tokens(tree: Tree, type_: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type == type_]


def _lookup(scope: Scope, name: str) -> Optional[BoundVar]:
	for depth, frame in enumerate(scope):
		for index, (bound, kind) in enumerate(frame):
			if bound == name:
				return BoundVar(kind, depth, index)
	return None


def _build_generics(tree: Optional[Tree]) -> Frame:
	if tree is None:
		return ()
	out: List[Tuple[str, ParameterKind]] = []
	for vars_tree in _trees(tree, "kinded_vars"):
		for var_tree in _trees(vars_tree, "kinded_var"):
			kind_tree, name_tok = var_tree.children
			if any(name == name_tok.value for name, _kind in out):
				raise ProgramParseError(
					f"parameter '{name_tok.value}' declared twice", loc=_loc_from_token(name_tok)
				)
			out.append((name_tok.value, _KINDS[_name(kind_tree)]))
	return tuple(out)


def _optional_tree(tree: Tree, name: str) -> Optional[Tree]:
	found = _trees(tree, name)
	return found[0] if found else None


def _build_param(tree: Tree, scope: Scope) -> Parameter:
	kind = _name(tree)
	if kind == "named":
		name_tok = tree.children[0]
		args_tree = _optional_tree(tree, "type_args")
		var = _lookup(scope, name_tok.value)
		if var is not None:
			if args_tree is not None:
				raise ProgramParseError(
					f"'{name_tok.value}' is a parameter and cannot take arguments", loc=_loc_from_token(name_tok)
				)
			return var
		return RigidTy(name_tok.value, _build_type_args(args_tree, scope))
	if kind == "alias_ty":
		self_tree = tree.children[0]
		trait_tok, item_tok = _tokens(tree, "NAME")
		args = _build_type_args(_optional_tree(tree, "type_args"), scope)
		return AliasTy(AliasName(trait_tok.value, item_tok.value), (_build_param(self_tree, scope),) + args)
	if kind == "lifetime":
		tok = tree.children[0]
		if tok.value == "'static":
			return STATIC
		var = _lookup(scope, tok.value[1:])
		if var is None or var.kind is not ParameterKind.LT:
			raise ProgramParseError(f"unknown lifetime {tok.value}", loc=_loc_from_token(tok))
		return var
	if kind == "const_value":
		return ConstValue(int(tree.children[0].value))
	raise ProgramParseError(f"unexpected parameter node '{kind}'", loc=_loc(tree))


def _build_type_args(tree: Optional[Tree], scope: Scope) -> Tuple[Parameter, ...]:
	if tree is None:
		return ()
	return tuple(_build_param(child, scope) for child in tree.children if isinstance(child, Tree))


def _build_trait_ref(tree: Tree, scope: Scope) -> TraitRef:
	name_tok = tree.children[0]
	params = tuple(_build_param(child, scope) for child in tree.children[1:] if isinstance(child, Tree))
	return TraitRef(name_tok.value, params)


def _build_wcs(tree: Optional[Tree], scope: Scope) -> Wcs:
	if tree is None:
		return ()
	return tuple(_build_wc(child, scope) for child in tree.children if isinstance(child, Tree))


def _build_wc(tree: Tree, scope: Scope) -> Wc:
	kind = _name(tree)
	if kind in ("for_wc", "exists_wc"):
		frame = _build_generics(tree.children[0])
		body = _build_wc(tree.children[1], (frame,) + scope)
		binder = Binder(tuple(k for _n, k in frame), body)
		return ForAll(binder) if kind == "for_wc" else Exists(binder)
	if kind == "implies_wc":
		hyps = _build_wcs(_optional_tree(tree, "wcs"), scope)
		return Implies(hyps, _build_wc(tree.children[-1], scope))
	if kind == "all_wc":
		return All(_build_wcs(_optional_tree(tree, "wcs"), scope))
	if kind == "is_implemented":
		return IsImplemented(_build_trait_ref(tree.children[0], scope))
	if kind == "not_implemented":
		return NotImplemented(_build_trait_ref(tree.children[0], scope))
	if kind == "special_atom":
		return _build_special_atom(tree, scope)
	if kind in ("equals", "sub", "outlives"):
		a = _build_param(tree.children[0], scope)
		b = _build_param(tree.children[1], scope)
		return {"equals": Equals, "sub": Sub, "outlives": Outlives}[kind](a, b)
	raise ProgramParseError(f"unexpected where-clause node '{kind}'", loc=_loc(tree))


def _build_special_atom(tree: Tree, scope: Scope) -> Wc:
	name_tok, arg = tree.children
	name = name_tok.value
	if name in ("WellFormedTraitRef", "IsLocal"):
		if _name(arg) != "trait_ref":
			raise ProgramParseError(f"@{name} expects a trait reference", loc=_loc_from_token(name_tok))
		trait_ref = _build_trait_ref(arg, scope)
		return WellFormedTraitRef(trait_ref) if name == "WellFormedTraitRef" else IsLocal(trait_ref)
	if name == "wf":
		if _name(arg) == "trait_ref":
			raise ProgramParseError("@wf expects a parameter", loc=_loc_from_token(name_tok))
		return WellFormed(_build_param(arg, scope))
	raise ProgramParseError(f"unknown built-in predicate @{name}", loc=_loc_from_token(name_tok))


def _build_where_clause(tree: Tree, scope: Scope) -> Wcs:
	return _build_wcs(_optional_tree(tree, "wcs"), scope)


def _is_local(tree: Tree) -> bool:
	return bool(_tokens(tree, "LOCAL"))


def _build_trait_decl(tree: Tree) -> TraitDecl:
	name_tok = _tokens(tree, "NAME")[0]
	frame = _build_generics(_optional_tree(tree, "generics"))
	if not frame or frame[0][1] is not ParameterKind.TY:
		raise ProgramParseError(
			f"trait '{name_tok.value}' must declare a type parameter for Self first", loc=_loc_from_token(name_tok)
		)
	wcs = _build_where_clause(_trees(tree, "where_clause")[0], (frame,))
	binder = Binder(tuple(k for _n, k in frame), TraitBoundData(wcs))
	return TraitDecl(name_tok.value, binder, local=_is_local(tree), loc=_loc(tree))


def _build_impl_decl(tree: Tree) -> ImplDecl:
	frame = _build_generics(_optional_tree(tree, "generics"))
	scope: Scope = (frame,)
	trait_ref = _build_trait_ref(_trees(tree, "trait_ref")[0], scope)
	wcs = _build_where_clause(_trees(tree, "where_clause")[0], scope)
	assoc: List[AssocValue] = []
	block = _optional_tree(tree, "assoc_block")
	if block is not None:
		for av in _trees(block, "assoc_value"):
			item_tok, value_tree = av.children
			if any(existing.item == item_tok.value for existing in assoc):
				raise ProgramParseError(
					f"associated type '{item_tok.value}' defined twice", loc=_loc_from_token(item_tok)
				)
			assoc.append(AssocValue(item_tok.value, _build_param(value_tree, scope)))
	binder = Binder(tuple(k for _n, k in frame), ImplBoundData(trait_ref, wcs, tuple(assoc)))
	return ImplDecl(binder, loc=_loc(tree))


def _build_struct_decl(tree: Tree) -> AdtDecl:
	name_tok = _tokens(tree, "NAME")[0]
	frame = _build_generics(_optional_tree(tree, "generics"))
	wcs = _build_where_clause(_trees(tree, "where_clause")[0], (frame,))
	binder = Binder(tuple(k for _n, k in frame), AdtBoundData(wcs))
	return AdtDecl(name_tok.value, binder, local=_is_local(tree), loc=_loc(tree))


def _build_alias_decl(tree: Tree) -> AliasEqDecl:
	frame = _build_generics(_optional_tree(tree, "generics"))
	scope: Scope = (frame,)
	lhs_tree, rhs_tree = [c for c in tree.children if isinstance(c, Tree) and _name(c) not in ("generics", "where_clause")]
	alias = _build_param(lhs_tree, scope)
	if not isinstance(alias, AliasTy):
		raise ProgramParseError("left side of an alias rule must be an alias type", loc=_loc(lhs_tree))
	value = _build_param(rhs_tree, scope)
	wcs = _build_where_clause(_trees(tree, "where_clause")[0], scope)
	binder = Binder(tuple(k for _n, k in frame), AliasEqBoundData(alias, value, wcs))
	return AliasEqDecl(binder, loc=_loc(tree))


def _build_program(tree: Tree) -> Decls:
	traits: List[TraitDecl] = []
	impls: List[ImplDecl] = []
	adts: List[AdtDecl] = []
	aliases: List[AliasEqDecl] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "trait_decl":
			traits.append(_build_trait_decl(child))
		elif kind == "impl_decl":
			impls.append(_build_impl_decl(child))
		elif kind == "struct_decl":
			adts.append(_build_struct_decl(child))
		elif kind == "alias_decl":
			aliases.append(_build_alias_decl(child))
		else:
			raise ProgramParseError(f"unexpected declaration '{kind}'", loc=_loc(child))
	return build_decls(traits, impls, adts, aliases)


def _build_query(tree: Tree) -> ParsedQuery:
	binder_tree = _optional_tree(tree, "query_binder")
	frame = _build_generics(binder_tree.children[0]) if binder_tree is not None else ()
	scope: Scope = (frame,)
	assumptions = _build_wcs(_optional_tree(_trees(tree, "assumptions")[0], "wcs"), scope)
	goals = _build_wcs(_optional_tree(_trees(tree, "goals")[0], "wcs"), scope)
	return ParsedQuery(Binder(tuple(k for _n, k in frame), QueryBody(assumptions, goals)))


__all__ = [
	"Located",
	"ProgramParseError",
	"QueryBody",
	"ParsedQuery",
	"parse_program",
	"parse_wc",
	"parse_wcs",
	"parse_query",
]
