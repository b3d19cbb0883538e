"""Storage-agnostic query description.

A Query is a list of (field, operator, value) predicates, optional OR-groups
and an optional sort. Builder methods skip predicates whose value is unset,
so optional request filters can be passed straight through.

Adapters translate a Query into their own filter language
(see adapter.mongodb.query and adapter.fake.query).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.model.errors import ValidationError


class Operator(str, Enum):
    EQ = 'eq'
    CONTAINS = 'contains'
    LT = 'lt'
    IS_NULL = 'is_null'


class SortDirection(str, Enum):
    ASC = 'asc'
    DESC = 'desc'


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: Operator
    value: Any = None


@dataclass(frozen=True)
class Sort:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass
class Query:
    """Conjunction of predicates, AND-ed with any of the OR-groups."""
    predicates: list[Predicate] = field(default_factory=list)
    alternatives: list[tuple[Predicate, ...]] = field(default_factory=list)
    sort: Sort | None = None

    def eq(self, field_name: str, value: Any) -> Query:
        if value is not None:
            self.predicates.append(Predicate(field_name, Operator.EQ, value))
        return self

    def contains(self, field_name: str, value: str | None) -> Query:
        """Case-sensitive substring match. Empty strings are ignored."""
        if value:
            self.predicates.append(Predicate(field_name, Operator.CONTAINS, value))
        return self

    def lt(self, field_name: str, value: Any) -> Query:
        if value is not None:
            self.predicates.append(Predicate(field_name, Operator.LT, value))
        return self

    def is_null(self, field_name: str) -> Query:
        self.predicates.append(Predicate(field_name, Operator.IS_NULL))
        return self

    def any_of(self, *branches: list[Predicate] | tuple[Predicate, ...]) -> Query:
        """Require at least one branch to match in full."""
        self.alternatives = [tuple(branch) for branch in branches]
        return self

    def order_by(self, field_name: str, direction: SortDirection = SortDirection.ASC) -> Query:
        self.sort = Sort(field_name, direction)
        return self

    @classmethod
    def by_id(cls, record_id: str, owner_field: str | None = None, owner_id: str | None = None) -> Query:
        """Equality on id, plus owner equality when an owner scope is given."""
        query = cls().eq('id', record_id)
        if owner_field:
            query.eq(owner_field, owner_id)
        return query


def resolve_sort(
    sort_by: str | None,
    order: SortDirection | None,
    allowed: dict[str, str],
    default_field: str = 'created_at',
) -> Sort:
    """Pick the sort for a list request.

    Without sort_by the default field is sorted newest first. With an
    explicit sort_by and no order, the direction is ascending. The two
    defaults differ on purpose and list endpoints rely on both.
    """
    if not sort_by:
        return Sort(default_field, SortDirection.DESC)

    field_name = allowed.get(sort_by)
    if field_name is None:
        raise ValidationError(f"Invalid sort field: {sort_by}")
    return Sort(field_name, order or SortDirection.ASC)
