# scoreboard/db/store_games.py
import logging
from pydantic import ValidationError
from sqlalchemy import DateTime, bindparam, text

from scoreboard.core.constants import MAX_GAMES
from scoreboard.db.database import Database
from scoreboard.db.results import NOT_FOUND, BulkResult, Failed, NotFound, Skipped
from scoreboard.schemas import Game, GameCreate, GameTeam, Gameday, Team

logger = logging.getLogger(__name__)

GAME_VIEW = """
    SELECT
        games.id AS id,
        games.date AS date,
        home_team.name AS home_name,
        games.home_score AS home_score,
        away_team.name AS away_name,
        games.away_score AS away_score
    FROM games
    LEFT JOIN teams AS home_team ON home_team.id = games.home
    LEFT JOIN teams AS away_team ON away_team.id = games.away
"""

INSERT_GAME = text(
    """
    INSERT INTO games (date, home, away, home_score, away_score)
    VALUES (:date, :home, :away, :home_score, :away_score)
    RETURNING id
    """
).bindparams(bindparam("date", type_=DateTime(timezone=True)))


def _row_to_game(row) -> Game:
    return Game(
        id=row["id"],
        date=row["date"],
        home=GameTeam(name=row["home_name"], score=row["home_score"]),
        away=GameTeam(name=row["away_name"], score=row["away_score"]),
    )


def games_limit(limit: int | None) -> int:
    # at least one game, never more than MAX_GAMES
    if not limit or limit <= 0:
        return MAX_GAMES
    return min(limit, MAX_GAMES)


async def get_games(db: Database, limit: int | None = MAX_GAMES) -> list[Game] | Failed:
    result = await db.query(
        GAME_VIEW + " ORDER BY games.date DESC, games.id DESC LIMIT :limit",
        {"limit": games_limit(limit)},
    )
    if result is None:
        return Failed("unable to get games")

    return [_row_to_game(row) for row in result.rows]


async def get_game(db: Database, id: int) -> Game | NotFound | Failed:
    result = await db.query(GAME_VIEW + " WHERE games.id = :id", {"id": id})
    if result is None:
        return Failed(f"unable to get game {id}")

    if len(result.rows) != 1:
        return NOT_FOUND

    return _row_to_game(result.rows[0])


async def insert_game(db: Database, game: GameCreate) -> Game | Failed:
    """
    Insert a game and read it back joined with the team names.
    Two round trips, not atomic.
    """
    result = await db.query(
        INSERT_GAME,
        {
            "date": game.date,
            "home": game.home_id,
            "away": game.away_id,
            "home_score": game.home_score,
            "away_score": game.away_score,
        },
    )

    if result is None or len(result.rows) != 1:
        logger.warning(f"Unable to insert game {game}")
        return Failed("unable to insert game")

    created = await get_game(db, result.rows[0]["id"])
    if isinstance(created, Game):
        return created
    return Failed("unable to fetch inserted game")


async def insert_gamedays(
    db: Database, gamedays: list[Gameday], db_teams: list[Team]
) -> BulkResult[Game]:
    """
    Insert every game of every gameday. Teams are matched by name against the
    already inserted teams; games that can't be resolved or inserted are
    logged and reported as skipped.
    """
    bulk: BulkResult[Game] = BulkResult()

    if not gamedays:
        logger.warning("No gamedays to insert")
        bulk.completed = False
        return bulk

    if not db_teams:
        logger.warning("No teams to insert gamedays for")
        bulk.completed = False
        return bulk

    team_ids = {}
    for t in db_teams:
        # first team with a given name wins
        team_ids.setdefault(t.name, t.id)

    for gameday in gamedays:
        for game in gameday.games:
            home_id = team_ids.get(game.home.name)
            away_id = team_ids.get(game.away.name)

            if home_id is None or away_id is None:
                logger.warning(
                    f"Unable to find team id for {game.home.name} vs {game.away.name}"
                )
                bulk.skipped.append(Skipped(item=game, reason="unknown team"))
                continue

            try:
                to_insert = GameCreate(
                    date=gameday.date,
                    home_id=home_id,
                    away_id=away_id,
                    home_score=game.home.score,
                    away_score=game.away.score,
                )
            except ValidationError as e:
                logger.warning(f"Invalid game on {gameday.date}: {e}")
                bulk.skipped.append(Skipped(item=game, reason="invalid game"))
                continue

            created = await insert_game(db, to_insert)
            if isinstance(created, Game):
                bulk.inserted.append(created)
            else:
                logger.warning(f"Unable to insert game on {gameday.date}: {created.cause}")
                bulk.skipped.append(Skipped(item=game, reason=created.cause))

    return bulk


async def delete_game(db: Database, id: int) -> bool:
    result = await db.query("DELETE FROM games WHERE id = :id", {"id": id})

    if result is None or result.row_count != 1:
        logger.warning(f"Unable to delete game {id}")
        return False
    return True
