from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer
from scoreboard.db.base import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)
    date = Column(DateTime(timezone=True), nullable=False)

    home = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    away = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)

    home_score = Column(Integer, nullable=False)
    away_score = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("home_score >= 0", name="ck_home_score"),
        CheckConstraint("away_score >= 0", name="ck_away_score"),
    )
