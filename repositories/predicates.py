"""
Typed filter predicates for catalog queries.

Services describe *what* to filter with small immutable predicate objects;
compile_predicate turns them into SQLAlchemy expressions for the dialect in
use. Set overlap becomes `&&` on PostgreSQL arrays and a json_each EXISTS
subquery on SQLite, so no SQL is ever assembled from strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from sqlalchemy import Text, and_, exists, false, func, literal, or_, select, true, type_coerce
from sqlalchemy.dialects.postgresql import ARRAY


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    """Scalar column value is one of `values`"""

    field: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class SetOverlaps:
    """Set-valued column shares at least one element with `values`"""

    field: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class LessThanOrEqual:
    field: str
    value: Any


@dataclass(frozen=True)
class GreaterThan:
    field: str
    value: Any


@dataclass(frozen=True)
class ContainsSubstring:
    """Case-insensitive substring match on a text column"""

    field: str
    value: str


@dataclass(frozen=True)
class And:
    clauses: Tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    clauses: Tuple["Predicate", ...]


Predicate = Union[
    Equals, AnyOf, SetOverlaps, LessThanOrEqual, GreaterThan, ContainsSubstring, And, Or
]


def all_of(*clauses: Optional[Predicate]) -> Optional[Predicate]:
    """Conjunction of the non-empty clauses; None when nothing is left."""
    kept = tuple(c for c in clauses if c is not None)
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return And(kept)


def any_of(*clauses: Optional[Predicate]) -> Optional[Predicate]:
    kept = tuple(c for c in clauses if c is not None)
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return Or(kept)


def overlaps(field: str, values: Sequence[str]) -> SetOverlaps:
    return SetOverlaps(field, tuple(values))


def _column(model, field: str):
    try:
        return getattr(model, field)
    except AttributeError:
        raise ValueError(f"{model.__name__} has no column '{field}'") from None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _set_overlap(column, values: Tuple[str, ...], dialect: str):
    if not values:
        return false()
    if dialect == "postgresql":
        return type_coerce(column, ARRAY(Text)).overlap(list(values))
    elements = func.json_each(column).table_valued("value")
    return exists(
        select(literal(1)).select_from(elements).where(elements.c.value.in_(values))
    )


def compile_predicate(model, predicate: Optional[Predicate], dialect: str = "postgresql"):
    """Render a predicate tree as a SQLAlchemy boolean expression for `model`."""
    if predicate is None:
        return true()
    if isinstance(predicate, And):
        return and_(*(compile_predicate(model, c, dialect) for c in predicate.clauses))
    if isinstance(predicate, Or):
        return or_(*(compile_predicate(model, c, dialect) for c in predicate.clauses))

    column = _column(model, predicate.field)
    if isinstance(predicate, Equals):
        if predicate.value is None:
            return column.is_(None)
        return column == predicate.value
    if isinstance(predicate, AnyOf):
        if not predicate.values:
            return false()
        return column.in_(predicate.values)
    if isinstance(predicate, SetOverlaps):
        return _set_overlap(column, predicate.values, dialect)
    if isinstance(predicate, LessThanOrEqual):
        return column <= predicate.value
    if isinstance(predicate, GreaterThan):
        return column > predicate.value
    if isinstance(predicate, ContainsSubstring):
        pattern = f"%{_escape_like(predicate.value.lower())}%"
        return func.lower(column).like(pattern, escape="\\")
    raise TypeError(f"Unsupported predicate: {predicate!r}")
