"""쿼리 예제 테스트 - 조회, 정렬, 페이징, 집계, 조인, 서브쿼리, CASE, 프로젝션, 벌크 연산.

Query example suite written with SQLAlchemy's select/update/delete builders
against teamA{member1(10), member2(20)}, teamB{member3(30), member4(40)}.
"""

import pytest
from sqlalchemy import String, case, cast, delete, func, inspect, literal, select, text, update
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, contains_eager

from querystudy.filters.composer import all_eq
from querystudy.filters.expressions import ClauseBuilder, Field
from querystudy.filters.predicates import age_eq, username_eq
from querystudy.filters.sql import to_sql
from querystudy.models import Member, Team
from querystudy.schemas.member import MemberDto, UserDto
from querystudy.utils.pagination import paginate

pytestmark = pytest.mark.usefixtures("members")

MEMBER_COLUMNS = {Field.MEMBER_USERNAME: Member.username, Field.MEMBER_AGE: Member.age}


class TestBasics:
    """기본 조회 테스트."""

    async def test_textual_query(self, db: AsyncSession):
        statement = text("SELECT id, username, age, team_id FROM members WHERE username = :username")
        result = await db.execute(
            select(Member).from_statement(statement.bindparams(username="member1"))
        )
        assert result.scalar_one().username == "member1"

    async def test_builder_query(self, db: AsyncSession):
        result = await db.execute(select(Member).where(Member.username == "member1"))
        assert result.scalar_one().age == 10

    async def test_search_with_and(self, db: AsyncSession):
        result = await db.execute(
            select(Member).where((Member.username == "member1") & (Member.age == 10))
        )
        assert result.scalar_one().username == "member1"

    async def test_search_with_where_params(self, db: AsyncSession):
        # where 인자를 나열하면 AND로 결합됨 - same as the & form
        result = await db.execute(
            select(Member).where(Member.username == "member1", Member.age == 10)
        )
        assert result.scalar_one().username == "member1"

    async def test_result_fetch(self, db: AsyncSession):
        fetched = (await db.execute(select(Member))).scalars().all()
        assert len(fetched) == 4

        with pytest.raises(MultipleResultsFound):
            (await db.execute(select(Member))).scalar_one_or_none()

        first = (await db.execute(select(Member).order_by(Member.id).limit(1))).scalar_one()
        assert first.username == "member1"

        total = (await db.execute(select(func.count()).select_from(Member))).scalar_one()
        assert total == 4


class TestSortAndPaging:
    """정렬/페이징 테스트."""

    async def test_sort_nulls_last(self, db: AsyncSession):
        db.add_all([
            Member(username=None, age=100),
            Member(username="member5", age=100),
            Member(username="member6", age=100),
        ])
        await db.flush()

        result = (await db.execute(
            select(Member)
            .where(Member.age == 100)
            .order_by(Member.age.desc(), Member.username.asc().nulls_last())
        )).scalars().all()

        assert [m.username for m in result] == ["member5", "member6", None]

    async def test_paging_offset_limit(self, db: AsyncSession):
        result = (await db.execute(
            select(Member).order_by(Member.username.desc()).offset(1).limit(2)
        )).scalars().all()
        assert [m.username for m in result] == ["member3", "member2"]

    async def test_paging_with_total(self, db: AsyncSession):
        rows, total = await paginate(db, select(Member).order_by(Member.username.desc()), 2, 2)
        assert [row[0].username for row in rows] == ["member2", "member1"]
        assert total == 4


class TestAggregation:
    """집계 함수/그룹 테스트."""

    async def test_aggregation(self, db: AsyncSession):
        row = (await db.execute(
            select(
                func.count(Member.id),
                func.sum(Member.age),
                func.avg(Member.age),
                func.max(Member.age),
                func.min(Member.age),
            )
        )).one()
        assert tuple(row) == (4, 100, 25, 40, 10)

    async def test_group_by_team(self, db: AsyncSession):
        """팀의 이름과 각 팀의 평균 연령."""
        rows = (await db.execute(
            select(Team.name, func.avg(Member.age))
            .select_from(Member)
            .join(Member.team)
            .group_by(Team.name)
            .order_by(Team.name)
        )).all()
        assert [(name, float(avg)) for name, avg in rows] == [("teamA", 15.0), ("teamB", 35.0)]

    async def test_group_by_having(self, db: AsyncSession):
        rows = (await db.execute(
            select(Team.name)
            .select_from(Member)
            .join(Member.team)
            .group_by(Team.name)
            .having(func.avg(Member.age) > 20)
        )).scalars().all()
        assert rows == ["teamB"]


class TestJoins:
    """조인 테스트."""

    async def test_inner_join(self, db: AsyncSession):
        """팀 A에 소속된 모든 회원."""
        result = (await db.execute(
            select(Member).join(Member.team).where(Team.name == "teamA").order_by(Member.id)
        )).scalars().all()
        assert [m.username for m in result] == ["member1", "member2"]

    async def test_theta_join(self, db: AsyncSession):
        """회원의 이름이 팀 이름과 같은 회원 (연관관계 없는 세타 조인)."""
        db.add_all([Member(username=name, age=0) for name in ("teamA", "teamB", "teamC")])
        await db.flush()

        result = (await db.execute(
            select(Member).where(Member.username == Team.name).order_by(Member.username)
        )).scalars().all()
        assert [m.username for m in result] == ["teamA", "teamB"]

    async def test_left_join_on_filtering(self, db: AsyncSession):
        """회원은 모두 조회하고, 팀은 teamA인 경우만 조인."""
        rows = (await db.execute(
            select(Member, Team)
            .outerjoin(Member.team.and_(Team.name == "teamA"))
            .order_by(Member.id)
        )).all()

        assert [(m.username, t.name if t else None) for m, t in rows] == [
            ("member1", "teamA"),
            ("member2", "teamA"),
            ("member3", None),
            ("member4", None),
        ]

    async def test_left_join_on_unrelated(self, db: AsyncSession):
        """연관관계 없는 엔티티 외부 조인 - 회원 이름과 팀 이름이 같은 경우."""
        db.add_all([Member(username=name, age=0) for name in ("teamA", "teamB", "teamC")])
        await db.flush()

        rows = (await db.execute(
            select(Member, Team)
            .outerjoin(Team, Member.username == Team.name)
            .order_by(Member.id)
        )).all()

        assert len(rows) == 7
        assert [m.username for m, t in rows if t is not None] == ["teamA", "teamB"]

    async def test_without_fetch_join_team_is_unloaded(self, db: AsyncSession):
        db.expunge_all()

        member = (await db.execute(
            select(Member).where(Member.username == "member1")
        )).scalar_one()
        assert "team" in inspect(member).unloaded

    async def test_fetch_join_loads_team(self, db: AsyncSession):
        db.expunge_all()

        member = (await db.execute(
            select(Member)
            .join(Member.team)
            .options(contains_eager(Member.team))
            .where(Member.username == "member1")
        )).scalar_one()
        assert "team" not in inspect(member).unloaded
        assert member.team.name == "teamA"


class TestSubqueries:
    """서브쿼리 테스트."""

    async def test_max_age(self, db: AsyncSession):
        """나이가 가장 많은 회원."""
        member_sub = aliased(Member)
        result = (await db.execute(
            select(Member).where(Member.age == select(func.max(member_sub.age)).scalar_subquery())
        )).scalars().all()
        assert [m.age for m in result] == [40]

    async def test_age_over_average(self, db: AsyncSession):
        """나이가 평균 이상인 회원."""
        member_sub = aliased(Member)
        result = (await db.execute(
            select(Member)
            .where(Member.age >= select(func.avg(member_sub.age)).scalar_subquery())
            .order_by(Member.age)
        )).scalars().all()
        assert [m.age for m in result] == [30, 40]

    async def test_in_subquery(self, db: AsyncSession):
        member_sub = aliased(Member)
        result = (await db.execute(
            select(Member)
            .where(Member.age.in_(select(member_sub.age).where(member_sub.age > 10)))
            .order_by(Member.age)
        )).scalars().all()
        assert [m.age for m in result] == [20, 30, 40]

    async def test_select_clause_subquery(self, db: AsyncSession):
        member_sub = aliased(Member)
        rows = (await db.execute(
            select(Member.username, select(func.avg(member_sub.age)).scalar_subquery())
            .order_by(Member.username)
        )).all()
        assert [(u, float(avg)) for u, avg in rows] == [
            ("member1", 25.0),
            ("member2", 25.0),
            ("member3", 25.0),
            ("member4", 25.0),
        ]


class TestCaseAndConstants:
    """CASE, 상수, 문자열 결합 테스트."""

    async def test_simple_case(self, db: AsyncSession):
        result = (await db.execute(
            select(case({10: "열살", 20: "스무살"}, value=Member.age, else_="기타"))
            .order_by(Member.age)
        )).scalars().all()
        assert result == ["열살", "스무살", "기타", "기타"]

    async def test_searched_case(self, db: AsyncSession):
        result = (await db.execute(
            select(
                case(
                    (Member.age.between(0, 20), "0~20살"),
                    (Member.age.between(21, 30), "21~30살"),
                    else_="기타",
                )
            ).order_by(Member.age)
        )).scalars().all()
        assert result == ["0~20살", "0~20살", "21~30살", "기타"]

    async def test_constant(self, db: AsyncSession):
        rows = (await db.execute(
            select(Member.username, literal("A")).order_by(Member.id).limit(1)
        )).all()
        assert tuple(rows[0]) == ("member1", "A")

    async def test_concat(self, db: AsyncSession):
        """username_age 형태로 결합."""
        result = (await db.execute(
            select(Member.username + "_" + cast(Member.age, String))
            .where(Member.username == "member1")
        )).scalar_one()
        assert result == "member1_10"


class TestProjections:
    """프로젝션 테스트 - 단일 컬럼, 튜플, DTO."""

    async def test_simple_projection(self, db: AsyncSession):
        result = (await db.execute(select(Member.username).order_by(Member.id))).scalars().all()
        assert result == ["member1", "member2", "member3", "member4"]

    async def test_tuple_projection(self, db: AsyncSession):
        rows = (await db.execute(select(Member.username, Member.age).order_by(Member.id))).all()
        assert [(r.username, r.age) for r in rows] == [
            ("member1", 10), ("member2", 20), ("member3", 30), ("member4", 40)
        ]

    async def test_dto_from_entities(self, db: AsyncSession):
        members = (await db.execute(select(Member).order_by(Member.id))).scalars().all()
        dtos = [MemberDto(username=m.username, age=m.age) for m in members]
        assert dtos[0] == MemberDto(username="member1", age=10)

    async def test_dto_by_fields(self, db: AsyncSession):
        rows = (await db.execute(select(Member.username, Member.age).order_by(Member.id))).all()
        dtos = [MemberDto.model_validate(dict(row._mapping)) for row in rows]
        assert [d.age for d in dtos] == [10, 20, 30, 40]

    async def test_dto_by_constructor_position(self, db: AsyncSession):
        # 위치 기반 - 컬럼 이름이 달라도 순서로 매핑
        rows = (await db.execute(select(Member.username, Member.age).order_by(Member.id))).all()
        dtos = [UserDto(name=username, age=age) for username, age in rows]
        assert dtos[-1] == UserDto(name="member4", age=40)

    async def test_dto_with_alias_and_subquery(self, db: AsyncSession):
        member_sub = aliased(Member)
        rows = (await db.execute(
            select(
                Member.username.label("name"),
                select(func.max(member_sub.age)).scalar_subquery().label("age"),
            ).order_by(Member.id)
        )).all()
        dtos = [UserDto.model_validate(dict(row._mapping)) for row in rows]
        assert dtos[0] == UserDto(name="member1", age=40)
        assert {d.age for d in dtos} == {40}


async def search_member_by_builder(db: AsyncSession, username: str | None, age: int | None):
    builder = ClauseBuilder()
    builder.and_(username_eq(username))
    builder.and_(age_eq(age))
    query = select(Member)
    if builder.has_value():
        query = query.where(to_sql(builder.value, MEMBER_COLUMNS))
    return (await db.execute(query)).scalars().all()


async def search_member_by_where_params(db: AsyncSession, username: str | None, age: int | None):
    clause = all_eq(username, age)
    query = select(Member)
    if clause is not None:
        query = query.where(to_sql(clause, MEMBER_COLUMNS))
    return (await db.execute(query)).scalars().all()


class TestDynamicQuery:
    """동적 쿼리 테스트 - 누적기와 where 인자."""

    @pytest.mark.parametrize("search", [search_member_by_builder, search_member_by_where_params])
    @pytest.mark.parametrize(
        "username, age, expected",
        [
            ("member1", 10, ["member1"]),
            ("member1", None, ["member1"]),
            (None, 10, ["member1"]),
            ("member1", 20, []),
            (None, None, ["member1", "member2", "member3", "member4"]),
        ],
    )
    async def test_dynamic_query(self, db: AsyncSession, search, username, age, expected):
        result = await search(db, username, age)
        assert sorted(m.username for m in result) == expected


class TestBulkOperations:
    """벌크 수정/삭제 테스트."""

    async def test_bulk_update(self, db: AsyncSession):
        result = await db.execute(
            update(Member).where(Member.age < 28).values(username="비회원")
        )
        assert result.rowcount == 2
        db.expire_all()

        names = (await db.execute(select(Member.username).order_by(Member.age))).scalars().all()
        assert names == ["비회원", "비회원", "member3", "member4"]

    async def test_bulk_add(self, db: AsyncSession):
        result = await db.execute(update(Member).values(age=Member.age + 1))
        assert result.rowcount == 4

        ages = (await db.execute(select(Member.age).order_by(Member.age))).scalars().all()
        assert ages == [11, 21, 31, 41]

    async def test_bulk_delete(self, db: AsyncSession):
        result = await db.execute(delete(Member).where(Member.age > 18))
        assert result.rowcount == 3

        remaining = (await db.execute(select(Member.username))).scalars().all()
        assert remaining == ["member1"]


class TestSqlFunctions:
    """SQL 함수 테스트."""

    async def test_replace(self, db: AsyncSession):
        result = (await db.execute(
            select(func.replace(Member.username, "member", "M")).order_by(Member.id)
        )).scalars().all()
        assert result == ["M1", "M2", "M3", "M4"]

    async def test_lower(self, db: AsyncSession):
        result = (await db.execute(
            select(Member.username).where(Member.username == func.lower(Member.username))
        )).scalars().all()
        assert len(result) == 4
