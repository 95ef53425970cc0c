"""팀 라우터 - 팀 생성 엔드포인트.

Team Router - Team creation endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.database import get_db
from querystudy.schemas.member import TeamCreate, TeamResponse
from querystudy.services.team_service import team_service

router: APIRouter = APIRouter()


@router.post("/", response_model=TeamResponse, status_code=201)
async def create_team(
    data: TeamCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamResponse:
    """새 팀을 생성합니다."""
    result: TeamResponse = await team_service.create_team(db, data)
    await db.commit()
    return result
