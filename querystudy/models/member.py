"""회원 SQLAlchemy ORM 모델 정의.

Member ORM model definition.

Tables:
    - members: 회원 (Member, optionally assigned to one team)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from querystudy.database import Base
from querystudy.models.team import Team


class Member(Base):
    """회원 모델 - 팀과 다대일 관계 (소유 측).

    Member model - Owning side of the many-to-one team association.
    A member may be teamless (team_id is NULL).

    Attributes:
        id: 고유 식별자 (Unique identifier, autoincrement)
        username: 회원 이름 (Username, nullable)
        age: 나이 (Age)
        team_id: 소속 팀 FK (Team foreign key, nullable)

    Relationships:
        team: 소속 팀 (Owning team, lazily loaded)
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 팀 삭제 시 회원은 유지 - no cascade from team to members
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("teams.id"), nullable=True)

    team = relationship("Team", back_populates="members")

    def change_team(self, team: Team) -> None:
        """회원의 팀을 변경합니다.

        Move the member to another team. back_populates keeps
        ``team.members`` in sync without loading the collection.
        """
        self.team = team

    def __repr__(self) -> str:
        return f"Member(id={self.id!r}, username={self.username!r}, age={self.age!r})"
