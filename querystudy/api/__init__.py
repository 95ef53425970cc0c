"""API 라우터 패키지 - 모든 엔드포인트 통합.

API Router package - Aggregates every router into a single ``api_router``
for inclusion in the FastAPI application.

Included routers:
    - members: 회원 등록/조회/검색 (Member registration, lookup, search)
    - teams: 팀 생성 (Team creation)
"""

from fastapi import APIRouter

from querystudy.api.members import router as members_router
from querystudy.api.teams import router as teams_router

api_router: APIRouter = APIRouter()

api_router.include_router(members_router, prefix="/members", tags=["Members"])
api_router.include_router(teams_router, prefix="/teams", tags=["Teams"])
