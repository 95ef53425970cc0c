"""회원 레포지토리 - 회원 CRUD 및 동적 조건 검색.

Member Repository - CRUD and dynamic-condition search for members.
Search results are projected into ``MemberTeamDto`` from a left outer
join with teams, so members without a team are never dropped.

Two search entry points build the same filter in different ways:
    - search_by_builder: 누적기(ClauseBuilder)로 하나의 조건을 만듦
    - search: 조건 목록을 WHERE 인자로 나열 (implicit AND list)
"""

from typing import Any, Sequence

from sqlalchemy import Select, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.filters.composer import compose_with_builder, present, where_params
from querystudy.filters.expressions import And, Clause, Field, fields_of
from querystudy.filters.sql import to_sql, to_sql_list
from querystudy.models.member import Member
from querystudy.models.team import Team
from querystudy.repositories.base import BaseRepository
from querystudy.schemas.member import MemberSearchCondition, MemberTeamDto
from querystudy.utils.pagination import count_rows, page_offset, paginate

# 표현식 속성 → ORM 컬럼 매핑 - Field to mapped column
MEMBER_TEAM_COLUMNS: dict[Field, Any] = {
    Field.MEMBER_ID: Member.id,
    Field.MEMBER_USERNAME: Member.username,
    Field.MEMBER_AGE: Member.age,
    Field.TEAM_ID: Team.id,
    Field.TEAM_NAME: Team.name,
}

_TEAM_FIELDS: frozenset[Field] = frozenset({Field.TEAM_ID, Field.TEAM_NAME})


def member_team_select() -> Select:
    """회원 LEFT JOIN 팀 프로젝션 SELECT를 생성합니다."""
    return (
        select(
            Member.id.label("member_id"),
            Member.username,
            Member.age,
            Team.id.label("team_id"),
            Team.name.label("team_name"),
        )
        .select_from(Member)
        .outerjoin(Member.team)
    )


def _to_dtos(rows: Sequence[Any]) -> list[MemberTeamDto]:
    return [MemberTeamDto.model_validate(dict(row._mapping)) for row in rows]


class MemberRepository(BaseRepository[Member]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    Provides save/find operations, builder and where-param searches,
    and two paged search variants.
    """

    def __init__(self) -> None:
        super().__init__(Member)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def save(self, db: AsyncSession, member: Member) -> Member:
        """회원을 영속화합니다. flush 후 ID가 할당됩니다.

        Persist a member and flush so its id is assigned.
        """
        db.add(member)
        await db.flush()
        return member

    async def find_by_id(self, db: AsyncSession, member_id: int) -> Member | None:
        return await self.get_by_id(db, member_id)

    async def find_all(self, db: AsyncSession) -> list[Member]:
        result = await db.execute(select(Member))
        return list(result.scalars().all())

    async def find_all_textual(self, db: AsyncSession) -> list[Member]:
        """문자열 SQL로 전체 회원을 조회합니다.

        Same result as ``find_all``, written as a textual statement
        mapped onto the Member entity.
        """
        statement = text("SELECT id, username, age, team_id FROM members")
        result = await db.execute(select(Member).from_statement(statement))
        return list(result.scalars().all())

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        result = await db.execute(select(Member).where(Member.username == username))
        return list(result.scalars().all())

    async def find_by_username_textual(self, db: AsyncSession, username: str) -> list[Member]:
        statement = text(
            "SELECT id, username, age, team_id FROM members WHERE username = :username"
        ).bindparams(username=username)
        result = await db.execute(select(Member).from_statement(statement))
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # 동적 조건 검색 - Dynamic condition search
    # ------------------------------------------------------------------

    async def search_by_builder(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
    ) -> list[MemberTeamDto]:
        """누적기 전략으로 회원을 검색합니다.

        Search members with the filter built by ``compose_with_builder``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 회원 검색 조건 (Member search condition)

        Returns:
            list[MemberTeamDto]: 회원+팀 프로젝션 목록 (Member/team projections)
        """
        builder: And = compose_with_builder(condition)
        query: Select = member_team_select()
        # 빈 누적기는 WHERE를 추가하지 않음 - an empty builder adds no WHERE
        if builder.clauses:
            query = query.where(to_sql(builder, MEMBER_TEAM_COLUMNS))

        result = await db.execute(query)
        return _to_dtos(result.all())

    async def search(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
    ) -> list[MemberTeamDto]:
        """조건 목록 전략으로 회원을 검색합니다.

        Search members passing the non-absent where params as an
        implicit AND list.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 회원 검색 조건 (Member search condition)

        Returns:
            list[MemberTeamDto]: 회원+팀 프로젝션 목록 (Member/team projections)
        """
        result = await db.execute(self._search_query(condition))
        return _to_dtos(result.all())

    async def search_page_simple(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[MemberTeamDto], int]:
        """내용과 전체 개수를 같은 쿼리로 조회하는 페이지 검색.

        Paged search; the total is counted over the same filtered join.

        Returns:
            tuple[list[MemberTeamDto], int]: (페이지 항목, 전체 개수)
        """
        query: Select = self._search_query(condition).order_by(Member.id)
        rows, total = await paginate(db, query, page, per_page)
        return _to_dtos(rows), total

    async def search_page_complex(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[MemberTeamDto], int]:
        """내용 쿼리와 개수 쿼리를 분리한 페이지 검색.

        Paged search with a separate count query. The count is skipped
        when the page alone determines the total: a first page that is
        not full, or a non-empty last page. The count query only joins
        teams when a team attribute is filtered.

        Returns:
            tuple[list[MemberTeamDto], int]: (페이지 항목, 전체 개수)
        """
        offset: int = page_offset(page, per_page)
        query: Select = self._search_query(condition).order_by(Member.id)
        result = await db.execute(query.offset(offset).limit(per_page))
        items: list[MemberTeamDto] = _to_dtos(result.all())

        if offset == 0 and len(items) < per_page:
            return items, len(items)
        if items and len(items) < per_page:
            return items, offset + len(items)

        return items, await count_rows(db, self._count_query(condition))

    # ------------------------------------------------------------------
    # 내부 쿼리 구성 - Query construction
    # ------------------------------------------------------------------

    def _search_query(self, condition: MemberSearchCondition) -> Select:
        clauses: list[Clause] = present(where_params(condition))
        query: Select = member_team_select()
        if clauses:
            query = query.where(*to_sql_list(clauses, MEMBER_TEAM_COLUMNS))
        return query

    def _count_query(self, condition: MemberSearchCondition) -> Select:
        clauses: list[Clause] = present(where_params(condition))
        query: Select = select(Member.id).select_from(Member)
        # 다대일 LEFT JOIN은 행 수를 바꾸지 않음 - many-to-one left join keeps the row count
        if any(field in _TEAM_FIELDS for clause in clauses for field in fields_of(clause)):
            query = query.outerjoin(Member.team)
        if clauses:
            query = query.where(*to_sql_list(clauses, MEMBER_TEAM_COLUMNS))
        return query


# 싱글턴 인스턴스 - Singleton instance
member_repository: MemberRepository = MemberRepository()
