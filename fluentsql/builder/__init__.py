"""Fluent MySQL statement builder."""

from fluentsql.builder._base import BuilderMode, QueryBuilder
from fluentsql.builder._binder import CompiledQuery, ParameterBinder, render_literal, substitute_parameters
from fluentsql.builder._pagination import PaginatedResult
from fluentsql.builder._predicates import PredicateGroup

__all__ = (
    "BuilderMode",
    "CompiledQuery",
    "PaginatedResult",
    "ParameterBinder",
    "PredicateGroup",
    "QueryBuilder",
    "render_literal",
    "substitute_parameters",
)
