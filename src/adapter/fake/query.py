"""In-memory evaluation of domain Query objects."""

from enum import Enum
from typing import Any, Iterable, TypeVar

from domain.model.query import Operator, Predicate, Query, SortDirection

T = TypeVar('T')


def _value(obj: Any, field_name: str) -> Any:
    value = getattr(obj, field_name, None)
    if isinstance(value, Enum):
        return value.value
    return value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _matches_predicate(obj: Any, predicate: Predicate) -> bool:
    actual = _value(obj, predicate.field)
    expected = _plain(predicate.value)

    if predicate.operator == Operator.EQ:
        return actual == expected
    if predicate.operator == Operator.CONTAINS:
        return actual is not None and str(expected) in str(actual)
    if predicate.operator == Operator.LT:
        return actual is not None and actual < expected
    if predicate.operator == Operator.IS_NULL:
        return actual is None
    raise ValueError(f"Unsupported operator: {predicate.operator}")


def matches(obj: Any, query: Query) -> bool:
    if not all(_matches_predicate(obj, p) for p in query.predicates):
        return False
    if query.alternatives:
        return any(
            all(_matches_predicate(obj, p) for p in branch)
            for branch in query.alternatives
        )
    return True


def apply(items: Iterable[T], query: Query) -> list[T]:
    """Filter and sort items the way a storage backend would."""
    results = [item for item in items if matches(item, query)]
    if query.sort:
        field_name = query.sort.field
        reverse = query.sort.direction == SortDirection.DESC
        results.sort(key=lambda item: _sort_key(item, field_name), reverse=reverse)
    return results


def _sort_key(item: Any, field_name: str) -> tuple:
    # None sorts before any value, as in MongoDB
    value = _value(item, field_name)
    if value is None:
        return (False, 0)
    return (True, value)
