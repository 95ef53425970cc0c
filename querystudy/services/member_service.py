"""회원 서비스 - 회원 등록, 조회, 검색 비즈니스 로직.

Member Service - Business logic for member registration, lookup and search.
Translates repository results into response schemas and maps a missing
record to NotFoundError.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models.member import Member
from querystudy.models.team import Team
from querystudy.repositories.member_repository import member_repository
from querystudy.repositories.team_repository import team_repository
from querystudy.schemas.member import (
    MemberCreate,
    MemberResponse,
    MemberSearchCondition,
    MemberTeamDto,
    MemberTeamPage,
)
from querystudy.utils.exceptions import NotFoundError
from querystudy.utils.pagination import page_count


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, member: Member) -> MemberResponse:
        return MemberResponse(
            id=member.id,
            username=member.username,
            age=member.age,
            team_id=member.team_id,
        )

    async def register_member(
        self,
        db: AsyncSession,
        data: MemberCreate,
    ) -> MemberResponse:
        """새 회원을 등록합니다.

        Register a new member, optionally assigning an existing team.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원 생성 데이터 (Member creation data)

        Returns:
            MemberResponse: 생성된 회원 (Created member)

        Raises:
            NotFoundError: 지정한 팀이 없을 때 (Team not found)
        """
        member: Member = Member(username=data.username, age=data.age)
        if data.team_id is not None:
            team: Team | None = await team_repository.get_by_id(db, data.team_id)
            if team is None:
                raise NotFoundError("Team not found")
            member.change_team(team)

        member = await member_repository.save(db, member)
        return self._to_response(member)

    async def get_member(
        self,
        db: AsyncSession,
        member_id: int,
    ) -> MemberResponse:
        """회원 한 명을 조회합니다.

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        member: Member | None = await member_repository.find_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return self._to_response(member)

    async def list_members(
        self,
        db: AsyncSession,
        username: str | None = None,
    ) -> list[MemberResponse]:
        """회원 목록을 조회합니다. 이름이 주어지면 일치하는 회원만."""
        if username is not None:
            members: list[Member] = await member_repository.find_by_username(db, username)
        else:
            members = await member_repository.find_all(db)
        return [self._to_response(m) for m in members]

    async def search_members(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        strategy: str = "where",
    ) -> list[MemberTeamDto]:
        """동적 조건으로 회원을 검색합니다.

        Search members; ``strategy`` selects the where-params ("where")
        or accumulator ("builder") composition. Both return the same rows.

        Raises:
            ValueError: 알 수 없는 전략 이름 (Unknown strategy name)
        """
        if strategy == "builder":
            return await member_repository.search_by_builder(db, condition)
        if strategy == "where":
            return await member_repository.search(db, condition)
        raise ValueError(f"Unknown search strategy: {strategy}")

    async def search_members_page(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page: int = 1,
        per_page: int = 20,
        count: str = "complex",
    ) -> MemberTeamPage:
        """동적 조건으로 회원을 페이지 단위로 검색합니다.

        Raises:
            ValueError: 알 수 없는 개수 조회 방식 (Unknown count mode)
        """
        if count == "simple":
            items, total = await member_repository.search_page_simple(db, condition, page, per_page)
        elif count == "complex":
            items, total = await member_repository.search_page_complex(db, condition, page, per_page)
        else:
            raise ValueError(f"Unknown count mode: {count}")

        return MemberTeamPage(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )


# 싱글턴 인스턴스 - Singleton instance
member_service: MemberService = MemberService()
