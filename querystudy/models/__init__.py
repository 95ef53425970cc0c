"""SQLAlchemy ORM 모델 패키지 - 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package - Central import point for all domain models.
Importing from this package registers every model with the metadata,
which relationship resolution and ``create_all`` depend on.

Modules:
    team: 팀 (Team)
    member: 회원 (Member)
"""

from querystudy.models.team import Team
from querystudy.models.member import Member

__all__ = ["Team", "Member"]
