# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from formality.prove import Constraints, constrain, merge_constraints, no_constraints, occurs_in
from formality.types import Binder, BoundVar, Equals, ExistentialVar, ParameterKind, RigidTy, Substitution

TY = ParameterKind.TY
X0 = ExistentialVar(TY, 0, 0)
X1 = ExistentialVar(TY, 1, 0)
X2 = ExistentialVar(TY, 2, 0)


def _vec(p) -> RigidTy:
	return RigidTy("Vec", (p,))


def test_occurs_check_makes_constraints_invalid() -> None:
	c = Constraints(True, Substitution(((X0, _vec(X0)),)))
	assert not c.is_valid()
	assert occurs_in(X0, _vec(X0))
	with pytest.raises(AssertionError):
		constrain(X0, _vec(X0))


def test_chained_bindings_are_invalid() -> None:
	c = Constraints(True, Substitution(((X0, _vec(X1)), (X1, RigidTy("u32")))))
	assert not c.is_valid()
	with pytest.raises(AssertionError):
		c.as_relations()


def test_ambiguous_only_clears_known_true() -> None:
	c = constrain(X0, RigidTy("u32")).peek()
	assert c.known_true
	amb = c.ambiguous()
	assert not amb.known_true
	assert amb.substitution == c.substitution
	assert amb.as_relations() == (Equals(X0, RigidTy("u32")),)


def test_merge_applies_inner_to_outer_and_hides_existentials() -> None:
	c0 = Constraints(True, Substitution(((X0, _vec(X1)),)))
	c1 = Binder.dummy(Constraints(True, Substitution(((X1, RigidTy("Rc", (X2,))),))))
	merged = merge_constraints((X2,), c0, c1)
	assert merged.kinds == (TY,)
	bound = BoundVar(TY, 0, 0)
	assert merged.term.substitution.bindings == (
		(X0, _vec(RigidTy("Rc", (bound,)))),
		(X1, RigidTy("Rc", (bound,))),
	)
	_vars, opened = merged.open()
	assert opened.is_valid()
	assert X2 not in opened.substitution.domain()


def test_merge_drops_bound_existentials() -> None:
	c1 = Binder.dummy(Constraints(True, Substitution(((X0, RigidTy("u32")), (X1, RigidTy("u32"))))))
	merged = merge_constraints((X1,), Constraints(), c1)
	assert merged.kinds == ()
	assert merged.peek().substitution.domain() == (X0,)


def test_merge_ands_known_true() -> None:
	c0 = Constraints().ambiguous()
	merged = merge_constraints((), c0, constrain(X0, RigidTy("u32")))
	assert not merged.peek().known_true


def test_merge_rejects_overlapping_domains() -> None:
	c0 = constrain(X0, RigidTy("u32")).peek()
	with pytest.raises(AssertionError):
		merge_constraints((), c0, constrain(X0, RigidTy("i32")))


def test_fold_that_breaks_invariant_raises() -> None:
	c = constrain(X0, _vec(X1)).peek()
	with pytest.raises(AssertionError):
		c.substitute(lambda v: X0 if v == X1 else None)


def test_no_constraints_is_empty_and_true() -> None:
	c = no_constraints().peek()
	assert c == Constraints()
	assert c.known_true
	assert c.as_relations() == ()
