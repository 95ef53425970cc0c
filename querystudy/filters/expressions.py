"""검색 조건 표현식 트리 - 비교 절과 AND 결합.

Filter expression tree - comparison clauses and AND composition.

A clause is one of ``Equals``, ``GreaterOrEqual``, ``LessOrEqual`` or
``And``. ``None`` stands for an absent clause and is the identity of
conjunction: combining anything with ``None`` returns the other operand.
The tree knows nothing about SQL; ``querystudy.filters.sql`` translates it.

Usage:
    from querystudy.filters.expressions import Equals, Field, all_of

    clause = all_of(Equals(Field.MEMBER_USERNAME, "member1"), None)
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Field(str, Enum):
    """필터링 가능한 엔티티 속성 - Filterable entity attributes."""

    MEMBER_ID = "member.id"
    MEMBER_USERNAME = "member.username"
    MEMBER_AGE = "member.age"
    TEAM_ID = "team.id"
    TEAM_NAME = "team.name"


class _Combinable:
    """``and_`` 결합 메서드를 제공하는 믹스인."""

    def and_(self, other: Clause | None) -> Clause:
        # self가 존재하므로 결과도 항상 존재 (self is present, so the result is too)
        return conjoin(self, other)  # type: ignore[arg-type,return-value]


@dataclass(frozen=True)
class Equals(_Combinable):
    """``field = value`` 비교 절."""

    field: Field
    value: Any


@dataclass(frozen=True)
class GreaterOrEqual(_Combinable):
    """``field >= value`` 비교 절."""

    field: Field
    value: Any


@dataclass(frozen=True)
class LessOrEqual(_Combinable):
    """``field <= value`` 비교 절."""

    field: Field
    value: Any


@dataclass(frozen=True)
class And(_Combinable):
    """하위 절 전체의 논리곱. 빈 튜플은 항상 참.

    Conjunction of all child clauses; an empty tuple always matches.
    """

    clauses: tuple[Clause, ...] = ()


Clause = Union[Equals, GreaterOrEqual, LessOrEqual, And]

# 논리곱의 항등원 - identity element of conjunction
ALWAYS_TRUE: And = And(())


def _flatten(clause: Clause) -> tuple[Clause, ...]:
    if isinstance(clause, And):
        return clause.clauses
    return (clause,)


def conjoin(left: Clause | None, right: Clause | None) -> Clause | None:
    """두 절을 AND로 결합합니다. 부재(None)는 항등원으로 취급합니다.

    Null-safe pairwise AND. An absent operand is skipped; when both are
    absent the result is absent too. Nested ``And`` nodes are flattened so
    that folding order alone determines the shape of the result.

    Args:
        left: 왼쪽 절 또는 None (Left clause or None)
        right: 오른쪽 절 또는 None (Right clause or None)

    Returns:
        Clause | None: 결합된 절 (Combined clause, or None if both absent)
    """
    if left is None:
        return right
    if right is None:
        return left
    return And(_flatten(left) + _flatten(right))


def all_of(*clauses: Clause | None) -> And:
    """부재 절을 걸러낸 뒤 나머지를 하나의 AND로 묶습니다.

    Null-skipping AND reducer. Returns ``ALWAYS_TRUE`` when every
    clause is absent.
    """
    present: list[Clause] = []
    for clause in clauses:
        if clause is not None:
            present.extend(_flatten(clause))
    return And(tuple(present))


class ClauseBuilder:
    """가변 누적기 - 항상 참에서 시작해 존재하는 절만 AND로 접습니다.

    Mutable accumulator starting from ``ALWAYS_TRUE``. ``and_`` folds a
    clause in and ignores ``None``; it returns the builder for chaining.
    """

    def __init__(self, initial: Clause | None = None) -> None:
        self._value: And = all_of(initial)

    def and_(self, clause: Clause | None) -> ClauseBuilder:
        if clause is not None:
            self._value = And(self._value.clauses + _flatten(clause))
        return self

    @property
    def value(self) -> And:
        return self._value

    def has_value(self) -> bool:
        return bool(self._value.clauses)


_COMPARATORS: dict[type, Callable[[Any, Any], bool]] = {
    Equals: operator.eq,
    GreaterOrEqual: operator.ge,
    LessOrEqual: operator.le,
}


def evaluate(clause: Clause | None, record: Mapping[Field, Any]) -> bool:
    """절을 메모리 내 레코드에 대해 평가합니다.

    Evaluate a clause against an in-memory record. A missing or None
    attribute never satisfies a comparison, matching SQL NULL semantics.
    An absent clause matches everything.
    """
    if clause is None:
        return True
    if isinstance(clause, And):
        return all(evaluate(child, record) for child in clause.clauses)

    actual: Any = record.get(clause.field)
    if actual is None or clause.value is None:
        return False
    return _COMPARATORS[type(clause)](actual, clause.value)


def fields_of(clause: Clause | None) -> Iterable[Field]:
    """절이 참조하는 속성을 순서대로 반환합니다."""
    if clause is None:
        return ()
    if isinstance(clause, And):
        return tuple(f for child in clause.clauses for f in fields_of(child))
    return (clause.field,)
