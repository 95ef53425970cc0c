"""검색 조건 팩토리 - 선택 조건 하나를 절 또는 부재(None)로 변환.

Predicate factory. Each function maps a single optional criterion to an
active clause, or to ``None`` when the criterion is absent. None of them
ever returns a clause that unconditionally matches or fails.
"""

from querystudy.filters.expressions import Equals, Field, GreaterOrEqual, LessOrEqual


# 공백으로 보지 않는 문자 - no-break spaces and NEL carry text
_NON_BLANK_SPACES = frozenset("\u00a0\u2007\u202f\x85")


def has_text(value: str | None) -> bool:
    """None, 빈 문자열, 공백 문자열이면 False.

    Return False for None, "" and whitespace-only text. No-break spaces
    (U+00A0, U+2007, U+202F) and U+0085 count as text.
    """
    if value is None:
        return False
    return any(not c.isspace() or c in _NON_BLANK_SPACES for c in value)


def username_eq(username: str | None) -> Equals | None:
    if has_text(username):
        return Equals(Field.MEMBER_USERNAME, username)
    return None


def team_name_eq(team_name: str | None) -> Equals | None:
    return Equals(Field.TEAM_NAME, team_name) if has_text(team_name) else None


def age_eq(age: int | None) -> Equals | None:
    # 0도 유효한 값 - zero is present, only None is absent
    return Equals(Field.MEMBER_AGE, age) if age is not None else None


def age_goe(age_goe: int | None) -> GreaterOrEqual | None:
    return GreaterOrEqual(Field.MEMBER_AGE, age_goe) if age_goe is not None else None


def age_loe(age_loe: int | None) -> LessOrEqual | None:
    return LessOrEqual(Field.MEMBER_AGE, age_loe) if age_loe is not None else None
