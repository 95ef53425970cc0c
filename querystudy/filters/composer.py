"""검색 조건 조합기 - 두 가지 동적 조건 구성 전략.

Predicate composer. Two interchangeable strategies build the same filter
from a ``MemberSearchCondition``:

    - builder: 가변 누적기에 존재하는 절만 접어 넣음
      (fold present clauses into a mutable ClauseBuilder)
    - where params: 모든 결과(부재 포함)를 순서대로 모은 뒤 부재를 제외
      (collect every factory result, then drop the absent ones)

Both fold in the fixed order username, team name, age lower bound,
age upper bound, so they return equal ``And`` values for every condition.
"""

from typing import Sequence

from querystudy.filters.expressions import And, Clause, ClauseBuilder, all_of, conjoin
from querystudy.filters.predicates import age_eq, age_goe, age_loe, team_name_eq, username_eq
from querystudy.schemas.member import MemberSearchCondition


def compose_with_builder(condition: MemberSearchCondition) -> And:
    """누적기 전략으로 검색 조건을 조합합니다.

    Accumulator strategy: start from always-true and AND in each
    active clause, skipping absent ones.

    Args:
        condition: 회원 검색 조건 (Member search condition)

    Returns:
        And: 조합된 필터 (Combined filter; ALWAYS_TRUE when nothing is set)
    """
    builder: ClauseBuilder = ClauseBuilder()
    builder.and_(username_eq(condition.username))
    builder.and_(team_name_eq(condition.team_name))
    builder.and_(age_goe(condition.age_goe))
    builder.and_(age_loe(condition.age_loe))
    return builder.value


def where_params(condition: MemberSearchCondition) -> list[Clause | None]:
    """조건별 절을 부재 표시(None)를 포함해 순서대로 반환합니다."""
    return [
        username_eq(condition.username),
        team_name_eq(condition.team_name),
        age_goe(condition.age_goe),
        age_loe(condition.age_loe),
    ]


def present(clauses: Sequence[Clause | None]) -> list[Clause]:
    """부재 절을 제외한 목록 - the implicit AND list handed to a query."""
    return [clause for clause in clauses if clause is not None]


def compose_where_params(condition: MemberSearchCondition) -> And:
    """조건 목록 전략으로 검색 조건을 조합합니다.

    Conjunction-list strategy: reduce ``where_params`` through the
    null-skipping ``all_of``.
    """
    return all_of(*where_params(condition))


def all_eq(username: str | None, age: int | None) -> Clause | None:
    """이름과 나이 일치 조건을 직접 결합합니다.

    Pairwise combination of the username and age equality clauses.
    Either side may be absent; absence is the identity of AND.
    """
    return conjoin(username_eq(username), age_eq(age))

