"""팀 서비스 - 팀 생성 비즈니스 로직.

Team Service - Team creation with a unique-name check.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models.team import Team
from querystudy.repositories.team_repository import team_repository
from querystudy.schemas.member import TeamCreate, TeamResponse
from querystudy.utils.exceptions import DuplicateError


class TeamService:
    """팀 관련 비즈니스 로직을 처리하는 서비스."""

    async def create_team(
        self,
        db: AsyncSession,
        data: TeamCreate,
    ) -> TeamResponse:
        """새 팀을 생성합니다.

        Create a new team.

        Raises:
            DuplicateError: 같은 이름의 팀이 이미 있을 때 (Team name already exists)
        """
        if await team_repository.exists(db, {"name": data.name}):
            raise DuplicateError("Team name already exists")

        team: Team = await team_repository.create(db, {"name": data.name})
        return TeamResponse(id=team.id, name=team.name)


# 싱글턴 인스턴스 - Singleton instance
team_service: TeamService = TeamService()
