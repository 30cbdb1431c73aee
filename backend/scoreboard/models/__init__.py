# importing the models registers their tables on Base.metadata
from scoreboard.models.team import Team
from scoreboard.models.game import Game

__all__ = ["Team", "Game"]
