"""테스트 인프라 - 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure - In-memory SQLite (aiosqlite) engine, session and
httpx client fixtures. The schema is created per test from the ORM
metadata, so every test starts from an empty database.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from querystudy.database import Base, get_db
from querystudy.main import app
from querystudy.models import Member, Team

# ---------------------------------------------------------------------------
# 테스트 DB 설정 - StaticPool로 하나의 인메모리 연결을 공유
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 스키마를 생성합니다."""
    eng = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 - DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: teamA{member1(10), member2(20)}, teamB{member3(30), member4(40)}
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def teams(db: AsyncSession) -> dict[str, Team]:
    """teamA, teamB를 생성합니다."""
    result = {name: Team(name=name) for name in ("teamA", "teamB")}
    db.add_all(result.values())
    await db.flush()
    return result


@pytest_asyncio.fixture
async def members(db: AsyncSession, teams: dict[str, Team]) -> dict[str, Member]:
    """기본 회원 4명을 생성합니다."""
    result: dict[str, Member] = {}
    for username, age, team_name in [
        ("member1", 10, "teamA"),
        ("member2", 20, "teamA"),
        ("member3", 30, "teamB"),
        ("member4", 40, "teamB"),
    ]:
        member = Member(username=username, age=age, team=teams[team_name])
        db.add(member)
        result[username] = member
    await db.flush()
    return result


def usernames(rows) -> list:
    """결과 행의 username을 정렬해 반환합니다 (None은 맨 뒤)."""
    return sorted((r.username for r in rows), key=lambda u: (u is None, u or ""))
