# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Environments and canonical queries."""

from .env import Env
from .query import (
	CanonicalQuery,
	Query,
	QueryResult,
	QueryResultBoundData,
	UniverseMap,
	canonicalize,
	canonicalize_query,
	extract_query_result,
)

__all__ = [
	"Env",
	"CanonicalQuery",
	"Query",
	"QueryResult",
	"QueryResultBoundData",
	"UniverseMap",
	"canonicalize",
	"canonicalize_query",
	"extract_query_result",
]
