# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest
from lark.exceptions import UnexpectedInput

from formality.parser import (
	ProgramParseError,
	load_program,
	load_query,
	parse_program,
	parse_query,
	parse_wc,
	parse_wcs,
)
from formality.types import (
	STATIC,
	AliasName,
	AliasTy,
	BoundVar,
	ConstValue,
	Equals,
	ExistentialVar,
	IsImplemented,
	Outlives,
	ParameterKind,
	RigidTy,
	TraitRef,
	pretty,
)
from formality.types.wc import Exists, ForAll

TY = ParameterKind.TY

PROGRAM = """
// Traits, impls, structs and an explicit alias rule.
trait Eq<ty Self> where {PartialEq(Self)}
trait PartialEq<ty Self> where {}
local trait Mine<ty Self, lt a> where {}
impl<ty T> Eq(Vec<T>) where {Eq(T),}
impl<ty A> Mirror(A) where {} { type T = A; }
local struct LocalType where {}
struct Arr<ty T, const N> where {}
alias<ty T> <Vec<T> as Mirror>::T = T where {}
"""


def test_program_declarations_are_collected() -> None:
	decls = parse_program(PROGRAM)
	assert [t.trait_id for t in decls.trait_decls] == ["Eq", "PartialEq", "Mine"]
	assert len(decls.impl_decls) == 2
	assert [a.adt_id for a in decls.adt_decls] == ["LocalType", "Arr"]
	assert len(decls.alias_eq_decls) == 1
	assert decls.diagnostics == []
	assert decls.is_local_trait("Mine")
	assert not decls.is_local_trait("Eq")
	assert decls.is_local_adt("LocalType")
	assert not decls.is_local_adt("Arr")
	assert decls.adt_decl("Arr").binder.kinds == (TY, ParameterKind.CONST)


def test_generic_names_become_bound_variables() -> None:
	decls = parse_program(PROGRAM)
	impl = decls.impls_of("Eq")[0]
	data = impl.binder.term
	t = BoundVar(TY, 0, 0)
	assert data.trait_ref == TraitRef("Eq", (RigidTy("Vec", (t,)),))
	assert data.where_clauses == (IsImplemented(TraitRef("Eq", (t,))),)
	assert str(impl) == "impl<ty> Eq(Vec<^ty0_0>) where {Eq(^ty0_0)}"


def test_trait_where_clauses_refer_to_self() -> None:
	decl = parse_program(PROGRAM).trait_decl("Eq")
	assert decl.binder.kinds == (TY,)
	assert decl.binder.term.where_clauses == (IsImplemented(TraitRef("PartialEq", (BoundVar(TY, 0, 0),))),)


def test_alias_rules_include_impl_associated_values() -> None:
	decls = parse_program(PROGRAM)
	rules = decls.alias_eq_rules(AliasName("Mirror", "T"))
	assert len(rules) == 2
	explicit, from_impl = rules
	assert explicit.term.alias == AliasTy(AliasName("Mirror", "T"), (RigidTy("Vec", (BoundVar(TY, 0, 0),)),))
	assert explicit.term.value == BoundVar(TY, 0, 0)
	assert from_impl.term.alias == AliasTy(AliasName("Mirror", "T"), (BoundVar(TY, 0, 0),))
	assert decls.alias_eq_rules(AliasName("Mirror", "Other")) == []


def test_nested_binders_use_de_bruijn_depth() -> None:
	wc = parse_wc("for<ty T> exists<ty U> Foo(T, U)")
	assert isinstance(wc, ForAll)
	inner = wc.binder.term
	assert isinstance(inner, Exists)
	assert inner.binder.term == IsImplemented(TraitRef("Foo", (BoundVar(TY, 1, 0), BoundVar(TY, 0, 0))))


def test_lifetimes_consts_and_aliases() -> None:
	assert parse_wc("for<lt a> 'a : 'static").binder.term == Outlives(BoundVar(ParameterKind.LT, 0, 0), STATIC)
	assert parse_wc("Arr<u8, 3> = Arr<u8, 3>") == Equals(
		RigidTy("Arr", (RigidTy("u8"), ConstValue(3))),
		RigidTy("Arr", (RigidTy("u8"), ConstValue(3))),
	)
	wc = parse_wc("<u32 as Mirror>::T = u32")
	assert wc == Equals(AliasTy(AliasName("Mirror", "T"), (RigidTy("u32"),)), RigidTy("u32"))


def test_where_clause_lists() -> None:
	wcs = parse_wcs("Foo(u32), if {Bar(u32)} Foo(u8), {u8 <: u8},")
	assert [pretty(wc) for wc in wcs] == ["Foo(u32)", "if {Bar(u32)} Foo(u8)", "{u8 <: u8}"]
	assert parse_wcs("") == ()


def test_special_atoms() -> None:
	assert pretty(parse_wc("@wf(Vec<u32>)")) == "@wf(Vec<u32>)"
	assert pretty(parse_wc("@IsLocal(Foo(u32))")) == "@IsLocal(Foo(u32))"
	assert pretty(parse_wc("@WellFormedTraitRef(Foo(u32))")) == "@WellFormedTraitRef(Foo(u32))"


@pytest.mark.parametrize(
	"source, message",
	[
		("for<ty T> 'b : 'static", "unknown lifetime 'b"),
		("for<ty T, lt T> Foo(T)", "parameter 'T' declared twice"),
		("for<ty T> Foo(T<u32>)", "'T' is a parameter and cannot take arguments"),
		("@Bogus(Foo(u32))", "unknown built-in predicate @Bogus"),
		("@IsLocal(u32)", "@IsLocal expects a trait reference"),
		("@wf(Foo(u32))", "@wf expects a parameter"),
	],
)
def test_scoping_errors(source: str, message: str) -> None:
	with pytest.raises(ProgramParseError) as excinfo:
		parse_wc(source)
	assert str(excinfo.value) == message
	assert excinfo.value.loc is not None


def test_declaration_errors() -> None:
	with pytest.raises(ProgramParseError, match="must declare a type parameter for Self"):
		parse_program("trait Foo<lt a> where {}")
	with pytest.raises(ProgramParseError, match="left side of an alias rule"):
		parse_program("alias<ty T> Vec<T> = T where {}")
	with pytest.raises(ProgramParseError, match="associated type 'T' defined twice"):
		parse_program("impl Foo(u32) where {} { type T = u8; type T = u16; }")


def test_syntax_errors_raise_lark_exceptions() -> None:
	with pytest.raises(UnexpectedInput):
		parse_program("trait {")
	with pytest.raises(UnexpectedInput):
		parse_wc("Foo(u32")


def test_duplicate_declarations_are_reported() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
trait Foo<ty Self> where {Bar(Self)}
struct S where {}
struct S where {}
""")
	assert [d.code for d in decls.diagnostics] == ["E_DUPLICATE_DECL", "E_DUPLICATE_DECL"]
	assert decls.diagnostics[0].message == "duplicate trait definition 'Foo'"
	assert decls.diagnostics[0].span.line == 3
	assert decls.trait_decl("Foo").binder.term.where_clauses == ()


def test_query_instantiates_existentials() -> None:
	query = parse_query("exists<ty X, ty Y> {Bar(Y)} => {Foo(X)}")
	env, assumptions, goals = query.instantiate()
	x = ExistentialVar(TY, 0, 0)
	y = ExistentialVar(TY, 1, 0)
	assert env.variables == (x, y)
	assert assumptions == (IsImplemented(TraitRef("Bar", (y,))),)
	assert goals == (IsImplemented(TraitRef("Foo", (x,))),)

	env, assumptions, goals = parse_query("{} => {Foo(u32)}").instantiate()
	assert env.variables == ()
	assert assumptions == ()


def test_load_program_reports_file_spans(tmp_path: Path) -> None:
	path = tmp_path / "bad.fml"
	path.write_text("trait Foo<ty Self> where {}\nimpl Foo(u32 where {}\n")
	decls, diags = load_program(path)
	assert decls is None
	assert len(diags) == 1
	assert diags[0].code == "E_SYNTAX"
	assert diags[0].phase == "parser"
	assert diags[0].span.file == str(path)
	assert diags[0].span.line == 2


def test_load_program_scoping_and_duplicate_errors(tmp_path: Path) -> None:
	path = tmp_path / "scope.fml"
	path.write_text("impl<ty T> Foo('a) where {}\n")
	decls, diags = load_program(path)
	assert decls is None
	assert diags[0].code == "E_PARSE"
	assert diags[0].message == "unknown lifetime 'a"
	assert diags[0].span.file == str(path)

	path = tmp_path / "dup.fml"
	path.write_text("trait Foo<ty Self> where {}\ntrait Foo<ty Self> where {}\n")
	decls, diags = load_program(path)
	assert decls is not None
	assert [(d.code, d.span.file, d.span.line) for d in diags] == [("E_DUPLICATE_DECL", str(path), 2)]


def test_load_query(tmp_path: Path) -> None:
	path = tmp_path / "q.fml"
	path.write_text("exists<ty X> {} => {Foo(X)}\n")
	query, diags = load_query(path)
	assert diags == []
	assert query is not None
	assert query.binder.kinds == (TY,)

	path.write_text("exists<ty X> {} {Foo(X)}\n")
	query, diags = load_query(path)
	assert query is None
	assert diags[0].code == "E_SYNTAX"
