from sqlalchemy import Column, Integer, Text, UniqueConstraint
from scoreboard.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)  # "Fram", escaped
    slug = Column(Text, nullable=False)  # "fram", derived from name
    description = Column(Text, nullable=False, default="")

    __table_args__ = (UniqueConstraint("slug", name="uq_team_slug"),)
