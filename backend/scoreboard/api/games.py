from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError
from scoreboard.api.validation import create_game_pipeline
from scoreboard.core.constants import MAX_GAMES
from scoreboard.db.database import Database
from scoreboard.db.results import Failed
from scoreboard.db.session import get_db
from scoreboard.db.store_games import (
    delete_game as delete_game_row,
    get_game as get_game_row,
    get_games,
    insert_game,
)
from scoreboard.schemas import Game, GameCreate
from scoreboard.services.parse import parse_date
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _as_int(value: str | None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@router.get("", response_model=list[Game])
async def list_games(limit: str | None = None, db: Database = Depends(get_db)):
    # unparsable limits fall back to MAX_GAMES like non-positive ones
    games = await get_games(db, _as_int(limit) or MAX_GAMES)
    if isinstance(games, Failed):
        raise HTTPException(status_code=500, detail="Could not get games")
    return games


@router.get("/{game_id}", response_model=Game)
async def get_game(game_id: str, db: Database = Depends(get_db)):
    id = _as_int(game_id)
    game = await get_game_row(db, id) if id is not None else None

    # absence and lookup failure both answer 404 here
    if not isinstance(game, Game):
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.post("", status_code=201, response_model=Game)
async def create_game(
    body: dict = Depends(create_game_pipeline), db: Database = Depends(get_db)
):
    try:
        game = GameCreate(
            date=parse_date(body["date"]),
            home_id=body["home"],
            away_id=body["away"],
            home_score=body["home_score"],
            away_score=body["away_score"],
        )
    except (ValueError, ValidationError) as e:
        # the pipeline already checked these, escaping should not break them
        logger.error(f"Validated game could not be built: {e}")
        raise HTTPException(status_code=500, detail="Could not create game")

    created = await insert_game(db, game)
    if isinstance(created, Failed):
        raise HTTPException(status_code=500, detail="Could not create game")
    return created


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, db: Database = Depends(get_db)):
    id = _as_int(game_id)
    deleted = await delete_game_row(db, id) if id is not None else False

    if not deleted:
        raise HTTPException(status_code=500, detail="Could not delete game")
    return Response(status_code=204)
