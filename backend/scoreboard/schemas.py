# Pydantic shapes shared by the repository, the parser and the API
from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr


class Team(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = ""


class GameTeam(BaseModel):
    name: str | None
    score: int


class Game(BaseModel):
    id: int
    date: datetime
    home: GameTeam
    away: GameTeam


class GameCreate(BaseModel):
    """Persisted form of a game before the store has assigned an id."""

    date: datetime
    home_id: int
    away_id: int
    home_score: int
    away_score: int


# bulk import records. strict so "0" or true never pass as a score
class TeamScore(BaseModel):
    model_config = ConfigDict(strict=True)

    name: StrictStr
    score: Annotated[StrictInt, Field(ge=0)] | Annotated[StrictFloat, Field(ge=0)]


class GamedayGame(BaseModel):
    home: TeamScore
    away: TeamScore


class Gameday(BaseModel):
    date: datetime
    games: list[GamedayGame]
