"""팀 SQLAlchemy ORM 모델 정의.

Team ORM model definition.

Tables:
    - teams: 회원이 소속되는 팀 (Team that members belong to)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from querystudy.database import Base


class Team(Base):
    """팀 모델 - 회원 관계의 역방향(inverse side).

    Team model - Inverse side of the member/team association.
    Deleting a team does not cascade to its members.

    Attributes:
        id: 고유 식별자 (Unique identifier, autoincrement)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 회원 목록 (Members of this team)
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    members = relationship("Member", back_populates="team")

    def __repr__(self) -> str:
        return f"Team(id={self.id!r}, name={self.name!r})"
