# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from formality.coherence import check_coherence, impls_may_overlap, overlapping_impls
from formality.config import SolverConfig
from formality.parser import parse_program

MIRROR_PRELUDE = """
trait Iterator<ty Self> where {}
trait Mirror<ty Self> where {}
impl<ty A> Mirror(A) where {} { type T = A; }
local struct LocalType where {}
local trait LocalTrait<ty Self> where {}
"""


def _report(program: str):
	return check_coherence(parse_program(program))


def test_where_clause_keeps_impls_apart_until_an_impl_exists() -> None:
	program = MIRROR_PRELUDE + """
impl<ty T> LocalTrait(T) where {Iterator(T)}
impl LocalTrait(<LocalType as Mirror>::T) where {}
"""
	assert _report(program) is None

	report = _report(program + "impl Iterator(LocalType) where {}\n")
	assert report is not None
	assert report.trait_id == "LocalTrait"
	assert report.message == (
		"impls may overlap:\n"
		"impl<ty> LocalTrait(^ty0_0) where {Iterator(^ty0_0)}\n"
		"impl LocalTrait(<LocalType as Mirror>::T) where {}"
	)


def test_alias_in_impl_header_normalizes_through_mirror() -> None:
	program = MIRROR_PRELUDE + """
impl<ty T> LocalTrait(T) where {Iterator(T)}
impl<ty T> LocalTrait(<T as Mirror>::T) where {Mirror(T)}
"""
	assert _report(program) is None

	report = _report(program + "impl Iterator(u32) where {}\n")
	assert report is not None
	assert report.message == (
		"impls may overlap:\n"
		"impl<ty> LocalTrait(^ty0_0) where {Iterator(^ty0_0)}\n"
		"impl<ty> LocalTrait(<^ty0_0 as Mirror>::T) where {Mirror(^ty0_0)}"
	)


def test_distinct_rigid_headers_do_not_overlap() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
impl Foo(u32) where {}
impl Foo(i32) where {}
impl<ty T> Foo(Vec<T>) where {}
""")
	assert list(overlapping_impls(decls)) == []


def test_generic_impl_overlaps_specific_one() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
impl<ty T> Foo(Vec<T>) where {}
impl Foo(Vec<u32>) where {}
impl Foo(u8) where {}
""")
	reports = list(overlapping_impls(decls))
	assert len(reports) == 1
	assert str(reports[0].impl_a) == "impl<ty> Foo(Vec<^ty0_0>) where {}"
	assert str(reports[0].impl_b) == "impl Foo(Vec<u32>) where {}"


def test_every_overlapping_pair_is_reported_in_declaration_order() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
trait Bar<ty Self> where {}
impl<ty T> Bar(T) where {}
impl<ty T> Foo(T) where {}
impl Foo(u32) where {}
impl Bar(u8) where {}
impl Foo(u8) where {}
""")
	pairs = [(r.trait_id, str(r.impl_a), str(r.impl_b)) for r in overlapping_impls(decls)]
	assert pairs == [
		("Bar", "impl<ty> Bar(^ty0_0) where {}", "impl Bar(u8) where {}"),
		("Foo", "impl<ty> Foo(^ty0_0) where {}", "impl Foo(u32) where {}"),
		("Foo", "impl<ty> Foo(^ty0_0) where {}", "impl Foo(u8) where {}"),
	]


def test_unprovable_negative_bound_is_ambiguous_for_foreign_traits() -> None:
	# Foreign trait, foreign type: a downstream impl could make `!Ext(u32)` false.
	decls = parse_program("""
trait Ext<ty Self> where {}
local trait Mine<ty Self> where {}
impl<ty T> Mine(T) where {!Ext(T)}
impl Mine(u32) where {}
""")
	assert check_coherence(decls) is not None


def test_overflow_counts_as_overlap() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
impl<ty T> Foo(T) where {Foo(Vec<T>)}
impl Foo(u32) where {}
""")
	impl_a, impl_b = decls.impls_of("Foo")
	assert impls_may_overlap(decls, impl_a, impl_b, SolverConfig(max_depth=8))


def test_overlap_diagnostic() -> None:
	decls = parse_program("""
trait Foo<ty Self> where {}
impl<ty T> Foo(T) where {}
impl Foo(u32) where {}
""")
	report = check_coherence(decls)
	assert report is not None
	diag = report.to_diagnostic()
	assert diag.code == "E_IMPL_OVERLAP"
	assert diag.phase == "coherence"
	assert diag.severity == "error"
	assert diag.notes == ["impl<ty> Foo(^ty0_0) where {}", "impl Foo(u32) where {}"]
	assert diag.span.line == 4
