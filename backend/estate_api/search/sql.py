"""Render predicate trees and order specs into SQLAlchemy queries.

JSON containment is dialect specific: PostgreSQL gets JSONB ``@>``, which
never fails on values of an unexpected type, while other stores compare the
extracted JSON path value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, false, func, or_, select, true, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Query, aliased

from estate_api.models.agent import Agent
from estate_api.models.listing import Listing
from estate_api.search.predicates import (
    And,
    Contains,
    Equals,
    ILike,
    NotEquals,
    Or,
    Predicate,
    Similar,
)
from estate_api.search.ranking import Direction, OrderBy, OrderBySimilarity, OrderSpec

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from sqlalchemy.sql.elements import ColumnElement

    from estate_api.search.composer import ListingQuery


def _column(entity: Any, field: str) -> Any:
    if field not in Listing.__table__.columns:
        raise ValueError(f"Unknown listing field: {field}")
    return getattr(entity, field)


def _json_value(element: Any, value: Any) -> Any:
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, int):
        return element.as_integer()
    if isinstance(value, float):
        return element.as_float()
    return element.as_string()


def _dialect_name(db: Session) -> str:
    return db.get_bind().dialect.name


def render(
    predicate: Predicate, entity: Any = Listing, dialect: str | None = None
) -> ColumnElement[bool]:
    """Turn a predicate tree into a SQL boolean expression over ``entity``.

    ``dialect`` is the name of the target store's dialect; only JSON
    containment depends on it.
    """
    if isinstance(predicate, Equals):
        column = _column(entity, predicate.field)
        if predicate.value is None:
            return column.is_(None)
        return column == predicate.value
    if isinstance(predicate, NotEquals):
        return _column(entity, predicate.field) != predicate.value
    if isinstance(predicate, ILike):
        return _column(entity, predicate.field).ilike(predicate.pattern, escape="\\")
    if isinstance(predicate, Contains):
        column = _column(entity, predicate.field)
        if dialect == "postgresql":
            return type_coerce(column, JSONB()).contains({predicate.key: predicate.value})
        return _json_value(column[predicate.key], predicate.value) == predicate.value
    if isinstance(predicate, Similar):
        column = _column(entity, predicate.field)
        return func.similarity(column, predicate.term) > predicate.threshold
    if isinstance(predicate, And):
        if not predicate.clauses:
            return true()
        return and_(*(render(c, entity, dialect) for c in predicate.clauses))
    if isinstance(predicate, Or):
        if not predicate.clauses:
            return false()
        return or_(*(render(c, entity, dialect) for c in predicate.clauses))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def render_order(order: OrderSpec, entity: Any = Listing) -> list[Any]:
    clauses = []
    for term in order:
        if isinstance(term, OrderBy):
            expression = _column(entity, term.field)
        elif isinstance(term, OrderBySimilarity):
            expression = func.similarity(_column(entity, term.field), term.term)
        else:
            raise TypeError(f"Unsupported order term: {term!r}")
        clauses.append(expression.asc() if term.direction == Direction.ASC else expression.desc())
    return clauses


def build_retrieval(db: Session, listing_query: ListingQuery) -> Query:
    """``(Listing, Agent)`` rows for ``listing_query``, ordered and windowed."""
    dialect = _dialect_name(db)
    query = (
        db.query(Listing, Agent)
        .join(Agent, Listing.user_id == Agent.id)
        .filter(render(listing_query.where, dialect=dialect))
    )

    if listing_query.distinct_site_path:
        # Highest id per site_path within the same filtered set
        inner = aliased(Listing)
        representatives = (
            select(func.max(inner.id))
            .where(render(listing_query.where, inner, dialect))
            .group_by(inner.site_path)
        )
        query = query.filter(Listing.id.in_(representatives))

    if listing_query.order:
        query = query.order_by(*render_order(listing_query.order))
    if listing_query.offset is not None:
        query = query.offset(listing_query.offset)
    if listing_query.limit is not None:
        query = query.limit(listing_query.limit)
    return query


def build_count(db: Session, listing_query: ListingQuery) -> Query:
    """Row count for ``listing_query``; ordering and windowing are ignored."""
    return (
        db.query(func.count(Listing.id))
        .select_from(Listing)
        .join(Agent, Listing.user_id == Agent.id)
        .filter(render(listing_query.where, dialect=_dialect_name(db)))
    )
