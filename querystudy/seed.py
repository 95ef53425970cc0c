"""샘플 데이터 시드 스크립트 - 팀 2개와 회원 100명 생성.

Seed script - Creates two teams and one hundred members for local use.

Usage:
    python -m querystudy.seed

Creates:
    - 2개 팀: teamA, teamB (2 teams)
    - 100명 회원: member0..member99, 나이 = 번호, 짝수는 teamA / 홀수는 teamB
      (100 members; age equals the index, even indexes in teamA, odd in teamB)
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.database import Base, async_session, engine
from querystudy.models import Member, Team

SAMPLE_MEMBER_COUNT: int = 100


async def seed_sample_data(db: AsyncSession) -> bool:
    """세션에 샘플 팀/회원을 추가합니다.

    Add the sample teams and members to the session and flush.
    Idempotent: 팀이 하나라도 있으면 건너뜁니다 (Skips when any team exists).

    Returns:
        bool: 데이터를 추가했는지 여부 (Whether data was inserted)
    """
    result = await db.execute(select(Team.id).limit(1))
    if result.scalar_one_or_none() is not None:
        return False

    team_a: Team = Team(name="teamA")
    team_b: Team = Team(name="teamB")
    db.add_all([team_a, team_b])

    for i in range(SAMPLE_MEMBER_COUNT):
        selected_team: Team = team_a if i % 2 == 0 else team_b
        db.add(Member(username=f"member{i}", age=i, team=selected_team))

    await db.flush()
    return True


async def seed() -> None:
    """테이블을 만들고 샘플 데이터를 커밋합니다."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        if not await seed_sample_data(db):
            print("Already seeded. Skipping.")
            return
        await db.commit()
        print(f"Seeded: teamA, teamB, {SAMPLE_MEMBER_COUNT} members")


if __name__ == "__main__":
    asyncio.run(seed())
