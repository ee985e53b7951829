# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Impl overlap checking."""

from .overlap import OverlapReport, check_coherence, impls_may_overlap, overlapping_impls

__all__ = ["OverlapReport", "check_coherence", "impls_may_overlap", "overlapping_impls"]
