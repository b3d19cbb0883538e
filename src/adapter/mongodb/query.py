"""Translate domain Query objects into MongoDB filter and sort specs."""

import re
from enum import Enum
from typing import Any

from pymongo import ASCENDING, DESCENDING

from domain.model.query import Operator, Predicate, Query, SortDirection


def _field(name: str) -> str:
    return '_id' if name == 'id' else name


def _value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _clause(predicate: Predicate) -> dict:
    name = _field(predicate.field)
    value = _value(predicate.value)

    if predicate.operator == Operator.EQ:
        return {name: value}
    if predicate.operator == Operator.CONTAINS:
        return {name: {'$regex': re.escape(str(value))}}
    if predicate.operator == Operator.LT:
        return {name: {'$lt': value}}
    if predicate.operator == Operator.IS_NULL:
        return {name: None}
    raise ValueError(f"Unsupported operator: {predicate.operator}")


def _conjunction(predicates) -> dict:
    clauses = [_clause(p) for p in predicates]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {'$and': clauses}


def to_filter(query: Query) -> dict:
    """Build the filter document for collection.find()."""
    doc = _conjunction(query.predicates)
    if query.alternatives:
        alternatives = {'$or': [_conjunction(branch) for branch in query.alternatives]}
        doc = {'$and': [doc, alternatives]} if doc else alternatives
    return doc


def to_sort(query: Query) -> list[tuple[str, int]] | None:
    """Build the sort spec for cursor.sort(), or None when unsorted."""
    if not query.sort:
        return None
    direction = DESCENDING if query.sort.direction == SortDirection.DESC else ASCENDING
    return [(_field(query.sort.field), direction)]
