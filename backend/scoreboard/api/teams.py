from fastapi import APIRouter, Depends, HTTPException
from scoreboard.api.validation import create_team_pipeline, update_team_pipeline
from scoreboard.db.database import Database
from scoreboard.db.results import Failed, NotFound
from scoreboard.db.session import get_db
from scoreboard.db.store_teams import (
    delete_team as delete_team_row,
    get_team as get_team_row,
    get_teams,
    insert_team,
    update_team as update_team_row,
)
from scoreboard.schemas import Team
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Team])
async def list_teams(db: Database = Depends(get_db)):
    teams = await get_teams(db)
    if isinstance(teams, Failed):
        raise HTTPException(status_code=500, detail="Could not get teams")
    return teams


@router.post("", status_code=201, response_model=Team)
async def create_team(
    body: dict = Depends(create_team_pipeline), db: Database = Depends(get_db)
):
    created = await insert_team(db, body["name"], body.get("description"))

    if not isinstance(created, Team):
        logger.error(f"Unable to create team {body['name']}: {created!r}")
        raise HTTPException(status_code=500, detail="Could not create team")
    return created


@router.get("/{slug}", response_model=Team)
async def get_team(slug: str, db: Database = Depends(get_db)):
    team = await get_team_row(db, slug)

    if isinstance(team, NotFound):
        raise HTTPException(status_code=404, detail="Team not found")
    if isinstance(team, Failed):
        raise HTTPException(status_code=500, detail="Could not get team")
    return team


@router.patch("/{slug}", response_model=Team)
async def update_team(
    slug: str,
    body: dict = Depends(update_team_pipeline),
    db: Database = Depends(get_db),
):
    team = await get_team_row(db, slug)
    if isinstance(team, NotFound):
        raise HTTPException(status_code=404, detail="Team not found")
    if isinstance(team, Failed):
        raise HTTPException(status_code=500, detail="Could not get team")

    updated = await update_team_row(
        db, team, name=body.get("name"), description=body.get("description")
    )

    if isinstance(updated, NotFound):
        raise HTTPException(status_code=404, detail="Team not found")
    if isinstance(updated, Failed):
        logger.error(f"Unable to update team {slug}: {updated.cause}")
        raise HTTPException(status_code=500, detail="Could not update team")
    return updated


@router.delete("/{slug}")
async def delete_team(slug: str, db: Database = Depends(get_db)) -> bool:
    deleted = await delete_team_row(db, slug)

    if not deleted:
        raise HTTPException(status_code=500, detail="Could not delete team")
    return deleted
