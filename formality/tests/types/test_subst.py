# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from formality.types import ExistentialVar, IsImplemented, ParameterKind, RigidTy, Substitution, TraitRef

TY = ParameterKind.TY


def test_apply_replaces_domain_variables() -> None:
	x = ExistentialVar(TY, 0, 0)
	subst = Substitution(((x, RigidTy("u32")),))
	goal = IsImplemented(TraitRef("Foo", (RigidTy("Vec", (x,)),)))
	assert subst.apply(goal) == IsImplemented(TraitRef("Foo", (RigidTy("Vec", (RigidTy("u32"),)),)))


def test_apply_shares_unchanged_terms() -> None:
	x = ExistentialVar(TY, 0, 0)
	y = ExistentialVar(TY, 1, 0)
	subst = Substitution(((x, RigidTy("u32")),))
	goal = IsImplemented(TraitRef("Foo", (RigidTy("Vec", (y,)),)))
	assert subst.apply(goal) is goal


def test_duplicate_keys_are_rejected() -> None:
	x = ExistentialVar(TY, 0, 0)
	with pytest.raises(ValueError):
		Substitution(((x, RigidTy("u32")), (x, RigidTy("i32"))))


def test_domain_range_and_get() -> None:
	x = ExistentialVar(TY, 0, 0)
	y = ExistentialVar(TY, 1, 0)
	subst = Substitution(((x, RigidTy("u32")), (y, x)))
	assert subst.domain() == (x, y)
	assert subst.range() == (RigidTy("u32"), x)
	assert subst.get(y) == x
	assert subst.get(RigidTy("u32")) is None
	assert subst.without([x]).domain() == (y,)
