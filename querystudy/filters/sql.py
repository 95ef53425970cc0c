"""표현식 트리 → SQLAlchemy 변환 어댑터.

Adapter translating the filter expression tree into SQLAlchemy column
expressions. The column map is supplied by the caller, so the same clause
can be applied to aliased entities or to plain Core tables.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import ColumnElement, and_, true

from querystudy.filters.expressions import And, Clause, Equals, Field, GreaterOrEqual, LessOrEqual

ColumnMap = Mapping[Field, Any]


def to_sql(clause: Clause, columns: ColumnMap) -> ColumnElement[bool]:
    """절 하나를 SQLAlchemy 불리언 표현식으로 변환합니다.

    Translate a clause into a SQLAlchemy boolean expression.
    An empty ``And`` becomes ``true()``.

    Args:
        clause: 변환할 절 (Clause to translate)
        columns: 속성 → 컬럼 매핑 (Field to column mapping)

    Returns:
        ColumnElement[bool]: WHERE 절에 사용할 표현식 (Expression usable in WHERE)

    Raises:
        KeyError: 매핑에 없는 속성을 참조할 때 (Field missing from the column map)
        TypeError: 알 수 없는 절 타입 (Unknown clause type)
    """
    if isinstance(clause, And):
        if not clause.clauses:
            return true()
        return and_(*(to_sql(child, columns) for child in clause.clauses))
    if isinstance(clause, Equals):
        return columns[clause.field] == clause.value
    if isinstance(clause, GreaterOrEqual):
        return columns[clause.field] >= clause.value
    if isinstance(clause, LessOrEqual):
        return columns[clause.field] <= clause.value
    raise TypeError(f"Unsupported clause: {clause!r}")


def to_sql_list(clauses: Sequence[Clause], columns: ColumnMap) -> list[ColumnElement[bool]]:
    """절 목록을 ``Select.where(*...)``에 넘길 표현식 목록으로 변환합니다."""
    return [to_sql(clause, columns) for clause in clauses]
