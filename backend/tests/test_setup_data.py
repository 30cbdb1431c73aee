"""
Tests for the bulk import job.
"""
import asyncio
import json

from scoreboard.core.config import Settings
from scoreboard.db.database import Database
from scoreboard.db.store_games import get_games
from scoreboard.db.store_teams import get_teams
from scoreboard.jobs.setup_data import run


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


def read_back(database_url):
    async def scenario():
        db = Database(database_url)
        db.open()
        try:
            return await get_teams(db), await get_games(db)
        finally:
            await db.close()

    return asyncio.run(scenario())


def test_import(tmp_path, database_url):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_json(data_dir / "teams.json", ["Alpha", "Beta", 3, "Gamma"])
    write_json(
        data_dir / "gameday-1.json",
        {
            "date": "2024-01-20T14:00:00.000Z",
            "games": [
                {"home": {"name": "Alpha", "score": 2}, "away": {"name": "Beta", "score": 1}},
                {"home": {"name": "Nobody", "score": 2}, "away": {"name": "Beta", "score": 1}},
            ],
        },
    )
    write_json(
        data_dir / "gameday-2.json",
        {
            "date": "2024-01-27",
            "games": [
                {"home": {"name": "Gamma", "score": 0}, "away": {"name": "Alpha", "score": 0}},
            ],
        },
    )
    # structurally broken, skipped without stopping the import
    (data_dir / "gameday-3.json").write_text("{not json", encoding="utf-8")

    settings = Settings(DATABASE_URL=database_url, _env_file=None)
    assert asyncio.run(run(settings, data_dir)) is True

    teams, games = read_back(database_url)
    assert [t.name for t in teams] == ["Alpha", "Beta", "Gamma"]
    assert [(g.home.name, g.away.name) for g in games] == [
        ("Gamma", "Alpha"),
        ("Alpha", "Beta"),
    ]


def test_import_without_gamedays_fails(tmp_path, database_url):
    write_json(tmp_path / "teams.json", ["Alpha", "Beta"])
    settings = Settings(DATABASE_URL=database_url, _env_file=None)

    assert asyncio.run(run(settings, tmp_path)) is False


def test_missing_teams_file_fails(tmp_path, database_url):
    settings = Settings(DATABASE_URL=database_url, _env_file=None)
    assert asyncio.run(run(settings, tmp_path)) is False

