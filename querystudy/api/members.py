"""회원 라우터 - 회원 등록, 조회, 동적 조건 검색 엔드포인트.

Member Router - Registration, lookup and dynamic-condition search endpoints.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.config import settings
from querystudy.database import get_db
from querystudy.schemas.member import (
    MemberCreate,
    MemberResponse,
    MemberSearchCondition,
    MemberTeamDto,
    MemberTeamPage,
)
from querystudy.services.member_service import member_service

router: APIRouter = APIRouter()


def search_condition(
    username: Annotated[str | None, Query(description="회원 이름 일치")] = None,
    team_name: Annotated[str | None, Query(description="팀 이름 일치")] = None,
    age_goe: Annotated[int | None, Query(description="나이 하한 (포함)")] = None,
    age_loe: Annotated[int | None, Query(description="나이 상한 (포함)")] = None,
) -> MemberSearchCondition:
    """쿼리 파라미터를 검색 조건으로 묶습니다."""
    return MemberSearchCondition(
        username=username,
        team_name=team_name,
        age_goe=age_goe,
        age_loe=age_loe,
    )


@router.get("/", response_model=list[MemberTeamDto])
async def search_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    condition: Annotated[MemberSearchCondition, Depends(search_condition)],
    strategy: Annotated[Literal["where", "builder"], Query()] = "where",
) -> list[MemberTeamDto]:
    """동적 조건으로 회원을 검색합니다.

    Search members with optional username, team name and age range filters.
    """
    return await member_service.search_members(db, condition, strategy)


@router.get("/page", response_model=MemberTeamPage)
async def search_members_page(
    db: Annotated[AsyncSession, Depends(get_db)],
    condition: Annotated[MemberSearchCondition, Depends(search_condition)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = settings.DEFAULT_PAGE_SIZE,
    count: Annotated[Literal["simple", "complex"], Query()] = "complex",
) -> MemberTeamPage:
    """동적 조건으로 회원을 페이지 단위로 검색합니다.

    Paged member search; ``count`` picks a single combined query ("simple")
    or a separate, skippable count query ("complex").
    """
    return await member_service.search_members_page(db, condition, page, per_page, count)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """회원 한 명을 조회합니다."""
    return await member_service.get_member(db, member_id)


@router.post("/", response_model=MemberResponse, status_code=201)
async def register_member(
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """새 회원을 등록합니다.

    Register a new member, optionally in an existing team.
    """
    result: MemberResponse = await member_service.register_member(db, data)
    await db.commit()
    return result
