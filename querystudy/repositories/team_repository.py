"""팀 레포지토리 - 팀 CRUD 및 이름 조회.

Team Repository - CRUD and lookup by name for teams.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models.team import Team
from querystudy.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Team)

    async def find_by_name(
        self,
        db: AsyncSession,
        name: str,
    ) -> Team | None:
        """이름으로 팀을 조회합니다. 같은 이름이 여럿이면 가장 먼저 생성된 팀.

        Retrieve a team by name; the oldest one wins on duplicates.
        """
        query: Select = select(Team).where(Team.name == name).order_by(Team.id).limit(1)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 - Singleton instance
team_repository: TeamRepository = TeamRepository()
