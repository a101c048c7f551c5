"""Immutable predicate tree over listing columns.

Both the retrieval query and the count query are rendered from these
nodes (see ``estate_api.search.sql``), so a filter added to one is
structurally present in the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class NotEquals:
    field: str
    value: Any


@dataclass(frozen=True)
class ILike:
    """Case-insensitive LIKE. ``pattern`` is already escaped with ``\\``."""

    field: str
    pattern: str


@dataclass(frozen=True)
class Contains:
    """JSON document ``field`` holds ``key`` with exactly ``value``."""

    field: str
    key: str
    value: Any


@dataclass(frozen=True)
class Similar:
    """Trigram similarity of ``field`` to ``term`` above ``threshold``."""

    field: str
    term: str
    threshold: float


@dataclass(frozen=True)
class And:
    clauses: tuple[Predicate, ...] = ()


@dataclass(frozen=True)
class Or:
    clauses: tuple[Predicate, ...] = ()


Predicate = Union[Equals, NotEquals, ILike, Contains, Similar, And, Or]

# An empty conjunction matches every row
MATCH_ALL = And()


def and_(*predicates: Predicate) -> Predicate:
    """Conjoin predicates, flattening nested ``And`` nodes."""
    clauses: list[Predicate] = []
    for predicate in predicates:
        if isinstance(predicate, And):
            clauses.extend(predicate.clauses)
        else:
            clauses.append(predicate)
    if len(clauses) == 1:
        return clauses[0]
    return And(tuple(clauses))


def or_(*predicates: Predicate) -> Predicate:
    if len(predicates) == 1:
        return predicates[0]
    return Or(tuple(predicates))


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_text(field: str, term: str) -> ILike:
    return ILike(field, f"%{escape_like(term)}%")
