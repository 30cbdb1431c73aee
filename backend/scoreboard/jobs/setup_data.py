"""
Recreate the schema and load teams and gamedays from JSON files.

    python -m scoreboard.jobs.setup_data [data_dir]

`data_dir` holds a `teams.json` array of team names and any number of
`gameday-*.json` documents.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from scoreboard.core.config import BASE_DIR, Settings
from scoreboard.db.database import Database
from scoreboard.db.store_games import insert_gamedays
from scoreboard.db.store_teams import insert_teams
from scoreboard.services.parse import ParseError, parse_gameday_file, parse_teams_json

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = BASE_DIR / "data"


def gameday_files(data_dir: Path) -> list[Path]:
    return sorted(p for p in data_dir.glob("gameday-*.json") if p.is_file())


async def setup_data(db: Database, data_dir: Path) -> bool:
    teams = parse_teams_json((data_dir / "teams.json").read_text(encoding="utf-8"))
    logger.info(f"Team names read: {len(teams)}")

    files = gameday_files(data_dir)
    logger.info(f"Gameday files found: {len(files)}")

    gamedays = []
    for path in files:
        try:
            gamedays.append(parse_gameday_file(path.read_text(encoding="utf-8"), teams))
        except ParseError as e:
            logger.error(f"Unable to parse {path.name}: {e}")
    logger.info(f"Gameday files parsed: {len(gamedays)}")

    inserted_teams = await insert_teams(db, teams)
    logger.info(
        f"Teams inserted: {len(inserted_teams.inserted)}, skipped: {len(inserted_teams.skipped)}"
    )

    inserted_games = await insert_gamedays(db, gamedays, inserted_teams.inserted)
    if not inserted_games.completed:
        logger.error("Error inserting gamedays")
        return False

    logger.info(
        f"Games inserted: {len(inserted_games.inserted)}, skipped: {len(inserted_games.skipped)}"
    )
    return True


async def run(settings: Settings, data_dir: Path) -> bool:
    db = Database(settings.DATABASE_URL)
    db.open()
    try:
        if not await db.create_schema(drop=True):
            logger.error("Error setting up database schema")
            return False
        logger.info("Schema created")

        try:
            return await setup_data(db, data_dir)
        except (OSError, ParseError) as e:
            logger.error(f"Error reading data from files: {e}")
            return False
    finally:
        await db.close()


def main(argv: list[str] | None = None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Load teams and gamedays into the database")
    parser.add_argument("data_dir", nargs="?", type=Path, default=DEFAULT_DATA_DIR)
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as e:
        logger.error(f"Environment is not configured correctly: {e}")
        sys.exit(1)

    logger.info("Starting setup")
    if not asyncio.run(run(settings, args.data_dir)):
        sys.exit(1)
    logger.info("Setup complete")


if __name__ == "__main__":
    main()
