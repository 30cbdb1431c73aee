# scoreboard/db/store_teams.py
import logging
from slugify import slugify

from scoreboard.db.conditional_update import conditional_update
from scoreboard.db.database import Database
from scoreboard.db.results import (
    ALREADY_EXISTS,
    NOT_FOUND,
    AlreadyExists,
    BulkResult,
    Failed,
    NotFound,
    Skipped,
)
from scoreboard.schemas import Team

logger = logging.getLogger(__name__)


def team_slug(name: str) -> str:
    return slugify(name)


def _row_to_team(row) -> Team:
    return Team(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        description=row["description"],
    )


async def get_team(db: Database, slug: str) -> Team | NotFound | Failed:
    result = await db.query(
        "SELECT id, name, slug, description FROM teams WHERE slug = :slug",
        {"slug": slug},
    )
    if result is None:
        return Failed(f"unable to get team {slug}")

    if len(result.rows) != 1:
        return NOT_FOUND

    return _row_to_team(result.rows[0])


async def get_teams(db: Database) -> list[Team] | Failed:
    result = await db.query("SELECT id, name, slug, description FROM teams ORDER BY id")
    if result is None:
        return Failed("unable to get teams")

    return [_row_to_team(row) for row in result.rows]


async def insert_team(
    db: Database, name: str, description: str | None = None
) -> Team | AlreadyExists | Failed:
    result = await db.query(
        """
        INSERT INTO teams (name, slug, description)
        VALUES (:name, :slug, :description)
        ON CONFLICT DO NOTHING
        RETURNING id, name, slug, description
        """,
        {"name": name, "slug": team_slug(name), "description": description or ""},
    )
    if result is None:
        return Failed(f"unable to insert team {name}")

    # the conflict clause swallowed the insert
    if not result.rows:
        return ALREADY_EXISTS

    return _row_to_team(result.rows[0])


async def insert_teams(db: Database, names: list[str]) -> BulkResult[Team]:
    """
    Insert teams one at a time, in order. Teams that can't be inserted are
    logged and reported as skipped, the rest are kept.
    """
    bulk: BulkResult[Team] = BulkResult()

    for name in names:
        result = await insert_team(db, name)
        if isinstance(result, Team):
            bulk.inserted.append(result)
            continue

        reason = "already exists" if result is ALREADY_EXISTS else result.cause
        logger.warning(f"Unable to insert team {name}: {reason}")
        bulk.skipped.append(Skipped(item=name, reason=reason))

    return bulk


async def update_team(
    db: Database,
    team: Team,
    name: str | None = None,
    description: str | None = None,
) -> Team | NotFound | Failed:
    # empty strings count as not supplied
    new_name = name if isinstance(name, str) and name else None
    new_description = description if isinstance(description, str) and description else None

    fields = [
        "name" if new_name else None,
        "slug" if new_name else None,
        "description" if new_description else None,
    ]
    values = [
        new_name,
        team_slug(new_name) if new_name else None,
        new_description,
    ]

    updated = await conditional_update(db, "teams", team.id, fields, values)
    if updated is False:
        # nothing to change
        return team
    if updated is None:
        return Failed(f"unable to update team {team.slug}")
    if not updated.rows:
        return NOT_FOUND

    return _row_to_team(updated.rows[0])


async def delete_team(db: Database, slug: str) -> bool:
    result = await db.query("DELETE FROM teams WHERE slug = :slug", {"slug": slug})

    if result is None or result.row_count != 1:
        logger.warning(f"Unable to delete team {slug}")
        return False
    return True
