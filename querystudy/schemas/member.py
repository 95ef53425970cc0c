"""회원/팀 관련 Pydantic 요청/응답 스키마 정의.

Member and Team Pydantic request/response schema definitions.
Includes the optional search condition, read-only projections
used by search results and example queries, and CRUD payloads.
"""

from pydantic import BaseModel, ConfigDict, Field


# === 검색 조건 (Search condition) ===

class MemberSearchCondition(BaseModel):
    """회원 검색 조건 - 모든 필드는 독립적으로 선택 사항.

    Member search condition. Every field is independently optional;
    an all-empty condition means no filtering.

    Attributes:
        username: 회원 이름 일치 (Exact username match)
        team_name: 팀 이름 일치 (Exact team name match)
        age_goe: 나이 하한, 포함 (Inclusive lower age bound)
        age_loe: 나이 상한, 포함 (Inclusive upper age bound)
    """

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None
    age_loe: int | None = None


# === 프로젝션 (Projections) ===

class MemberTeamDto(BaseModel):
    """회원 + 팀 조인 결과 프로젝션 (읽기 전용).

    Read-only projection of a member row left-joined with its team.
    Team fields are None for teamless members.
    """

    model_config = ConfigDict(frozen=True)

    member_id: int
    username: str | None
    age: int
    team_id: int | None = None
    team_name: str | None = None


class MemberDto(BaseModel):
    """회원 이름/나이 프로젝션."""

    username: str | None = None
    age: int = 0


class UserDto(BaseModel):
    """별칭(alias) 프로젝션 - username을 name으로 받습니다."""

    name: str | None = None
    age: int = 0


class MemberTeamPage(BaseModel):
    """회원 검색 페이지 응답.

    Paged member search response.

    Attributes:
        items: 현재 페이지 항목 (Items for the current page)
        total: 전체 항목 수 (Total matching rows)
        page: 현재 페이지 번호, 1부터 시작 (Current page, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total pages)
    """

    items: list[MemberTeamDto]
    total: int
    page: int
    per_page: int
    pages: int


# === 회원/팀 CRUD (Member/Team CRUD) ===

class TeamCreate(BaseModel):
    """팀 생성 요청 스키마."""

    name: str = Field(min_length=1, max_length=100)


class TeamResponse(BaseModel):
    """팀 응답 스키마."""

    id: int
    name: str


class MemberCreate(BaseModel):
    """회원 생성 요청 스키마.

    Member creation request. ``team_id`` is optional; omit it to
    create a teamless member.
    """

    username: str | None = Field(default=None, max_length=100)
    age: int = Field(default=0, ge=0)
    team_id: int | None = None


class MemberResponse(BaseModel):
    """회원 응답 스키마."""

    id: int
    username: str | None
    age: int
    team_id: int | None = None
