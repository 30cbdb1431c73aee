"""
Tests for the team and game store functions against SQLite.
"""
import asyncio
from datetime import datetime, timedelta, timezone

from scoreboard.core.constants import MAX_GAMES
from scoreboard.db.results import ALREADY_EXISTS, NOT_FOUND, Failed
from scoreboard.db.store_games import (
    delete_game,
    games_limit,
    get_game,
    get_games,
    insert_game,
    insert_gamedays,
)
from scoreboard.db.store_teams import (
    delete_team,
    get_team,
    get_teams,
    insert_team,
    insert_teams,
    team_slug,
    update_team,
)
from scoreboard.models.team import Team as TeamRow
from scoreboard.schemas import Game, GameCreate, Gameday, GamedayGame, Team, TeamScore

START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def game_for(home: Team, away: Team, days: int = 0, home_score: int = 1, away_score: int = 0):
    return GameCreate(
        date=START + timedelta(days=days),
        home_id=home.id,
        away_id=away.id,
        home_score=home_score,
        away_score=away_score,
    )


class TestTeams:
    def test_slug_is_lowercase_and_url_safe(self):
        assert team_slug("Test") == "test"
        assert team_slug("Knattspyrnufélagið Kórinn") == "knattspyrnufelagid-korinn"

    def test_insert_then_get_by_slug(self, open_db):
        async def scenario():
            async with open_db() as db:
                created = await insert_team(db, "Test Team", "x")
                fetched = await get_team(db, "test-team")
                return created, fetched

        created, fetched = asyncio.run(scenario())

        assert isinstance(created, Team)
        assert created.slug == "test-team"
        assert fetched == created
        assert fetched.name == "Test Team"
        assert fetched.description == "x"

    def test_insert_duplicate_slug(self, open_db):
        async def scenario():
            async with open_db() as db:
                await insert_team(db, "Test")
                return await insert_team(db, "TEST")

        assert asyncio.run(scenario()) is ALREADY_EXISTS

    def test_get_missing_team(self, open_db):
        async def scenario():
            async with open_db() as db:
                return await get_team(db, "nope")

        assert asyncio.run(scenario()) is NOT_FOUND

    def test_get_teams_empty_is_empty_list(self, open_db):
        async def scenario():
            async with open_db() as db:
                return await get_teams(db)

        assert asyncio.run(scenario()) == []

    def test_get_teams_failure(self, database_url):
        from scoreboard.db.database import Database

        # never opened
        result = asyncio.run(get_teams(Database(database_url)))
        assert isinstance(result, Failed)

    def test_insert_teams_keeps_order_and_reports_skipped(self, open_db):
        async def scenario():
            async with open_db() as db:
                return await insert_teams(db, ["B", "A", "b", "C"])

        bulk = asyncio.run(scenario())

        assert [t.name for t in bulk.inserted] == ["B", "A", "C"]
        assert [s.item for s in bulk.skipped] == ["b"]
        assert bulk.skipped[0].reason == "already exists"
        assert bulk.completed

    def test_update_team_name_rederives_slug(self, open_db):
        async def scenario():
            async with open_db() as db:
                team = await insert_team(db, "Old Name", "desc")
                updated = await update_team(db, team, name="New Name")
                old = await get_team(db, "old-name")
                return updated, old

        updated, old = asyncio.run(scenario())

        assert updated.name == "New Name"
        assert updated.slug == "new-name"
        assert updated.description == "desc"
        assert old is NOT_FOUND

    def test_update_team_description_only(self, open_db):
        async def scenario():
            async with open_db() as db:
                team = await insert_team(db, "Team", "desc")
                return await update_team(db, team, name=None, description="other")

        updated = asyncio.run(scenario())
        assert updated.slug == "team"
        assert updated.description == "other"

    def test_delete_team(self, open_db):
        async def scenario():
            async with open_db() as db:
                await insert_team(db, "Gone")
                first = await delete_team(db, "gone")
                second = await delete_team(db, "gone")
                return first, second

        assert asyncio.run(scenario()) == (True, False)


class TestGames:
    def test_insert_then_get(self, open_db):
        async def scenario():
            async with open_db() as db:
                home = await insert_team(db, "Home")
                away = await insert_team(db, "Away")
                created = await insert_game(db, game_for(home, away, home_score=3, away_score=2))
                fetched = await get_game(db, created.id)
                return created, fetched

        created, fetched = asyncio.run(scenario())

        assert isinstance(created, Game)
        assert fetched == created
        assert created.home.name == "Home"
        assert created.home.score == 3
        assert created.away.name == "Away"
        assert created.away.score == 2
        assert created.date.replace(tzinfo=timezone.utc) == START

    def test_get_missing_game(self, open_db):
        async def scenario():
            async with open_db() as db:
                return await get_game(db, 999)

        assert asyncio.run(scenario()) is NOT_FOUND

    def test_games_limit(self):
        assert games_limit(0) == MAX_GAMES
        assert games_limit(-5) == MAX_GAMES
        assert games_limit(None) == MAX_GAMES
        assert games_limit(150) == MAX_GAMES
        assert games_limit(10) == 10

    def test_get_games_caps_and_orders(self, open_db):
        async def scenario():
            async with open_db() as db:
                home = await insert_team(db, "Home")
                away = await insert_team(db, "Away")
                for day in range(MAX_GAMES + 5):
                    await insert_game(db, game_for(home, away, days=day))
                return (
                    await get_games(db, 0),
                    await get_games(db, 150),
                    await get_games(db, 10),
                )

        zero, many, ten = asyncio.run(scenario())

        assert len(zero) == MAX_GAMES
        assert len(many) == MAX_GAMES
        assert len(ten) == 10
        # newest first
        assert ten[0].date > ten[-1].date

    def test_delete_game(self, open_db):
        async def scenario():
            async with open_db() as db:
                home = await insert_team(db, "Home")
                away = await insert_team(db, "Away")
                game = await insert_game(db, game_for(home, away))
                return (
                    await delete_game(db, game.id),
                    await delete_game(db, game.id),
                    await get_game(db, game.id),
                )

        deleted, again, fetched = asyncio.run(scenario())
        assert deleted is True
        assert again is False
        assert fetched is NOT_FOUND


class TestInsertGamedays:
    def gameday(self, *pairs):
        return Gameday(
            date=START,
            games=[
                GamedayGame(
                    home=TeamScore(name=home, score=1),
                    away=TeamScore(name=away, score=2),
                )
                for home, away in pairs
            ],
        )

    def test_resolves_names_and_skips_unknown(self, open_db):
        async def scenario():
            async with open_db() as db:
                teams = await insert_teams(db, ["Alpha", "Beta", "Gamma"])
                gamedays = [
                    self.gameday(("Alpha", "Beta"), ("Alpha", "Unknown")),
                    self.gameday(("Gamma", "Alpha")),
                ]
                bulk = await insert_gamedays(db, gamedays, teams.inserted)
                return bulk, await get_games(db)

        bulk, games = asyncio.run(scenario())

        assert bulk.completed
        assert len(bulk.inserted) == 2
        assert len(bulk.skipped) == 1
        assert bulk.skipped[0].reason == "unknown team"
        assert {(g.home.name, g.away.name) for g in games} == {
            ("Alpha", "Beta"),
            ("Gamma", "Alpha"),
        }

    def test_nothing_to_insert(self, open_db):
        async def scenario():
            async with open_db() as db:
                teams = await insert_teams(db, ["Alpha", "Beta"])
                no_gamedays = await insert_gamedays(db, [], teams.inserted)
                no_teams = await insert_gamedays(db, [self.gameday(("Alpha", "Beta"))], [])
                return no_gamedays, no_teams

        no_gamedays, no_teams = asyncio.run(scenario())
        assert not no_gamedays.completed
        assert not no_teams.completed


def test_team_name_and_slug_columns_are_unbounded():
    # escaping and slugifying can outgrow the 64 character input limit
    assert TeamRow.__table__.c.name.type.length is None
    assert TeamRow.__table__.c.slug.type.length is None
    assert len(team_slug("Þ" * 64)) == 128
