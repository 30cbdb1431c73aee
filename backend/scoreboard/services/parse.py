"""
Parsers for the bulk import files.

Two kinds of failure are kept apart on purpose:

- a structurally broken document raises a ``ParseError`` and the whole file
  is rejected,
- a single bad team or game inside an otherwise valid document is logged and
  dropped, the rest of the file is kept.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import ValidationError

from scoreboard.schemas import Gameday, GamedayGame, TeamScore

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    pass


class TeamsParseError(ParseError):
    pass


class GamedayParseError(ParseError):
    pass


def parse_teams_json(data: str) -> list[str]:
    """
    Parse a JSON array of team names. Non-string entries are skipped.
    Raises TeamsParseError if the text isn't JSON or isn't an array.
    """
    try:
        teams = json.loads(data)
    except ValueError as e:
        raise TeamsParseError("unable to parse teams data") from e

    if not isinstance(teams, list):
        raise TeamsParseError("teams data is not an array")

    return [team for team in teams if isinstance(team, str)]


def parse_team(data: Any, teams: Iterable[str] = ()) -> TeamScore | None:
    if not isinstance(data, dict):
        logger.warning(f"Illegal team object: {data!r}")
        return None

    try:
        team = TeamScore.model_validate(data)
    except ValidationError:
        logger.warning(f"Illegal team data: {data!r}")
        return None

    if team.name not in teams:
        logger.warning(f"Unknown team: {team.name!r}")
        return None

    return team


def parse_gameday_games(data: Any, teams: Iterable[str] = ()) -> list[GamedayGame]:
    if not isinstance(data, list):
        return []

    allowed = list(teams)
    games = []

    for game in data:
        if not isinstance(game, dict):
            raise GamedayParseError("game data is not an object")

        if "home" not in game or "away" not in game:
            raise GamedayParseError("game data does not have home and away")

        home = parse_team(game["home"], allowed)
        away = parse_team(game["away"], allowed)

        if home and away:
            games.append(GamedayGame(home=home, away=away))

    return games


def parse_date(value: str) -> datetime:
    """ISO 8601 date or date-time. Naive values are taken to be UTC."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_gameday_file(data: str, teams: Iterable[str] = ()) -> Gameday:
    """
    Parse one gameday document: {"date": "...", "games": [...]}.
    Checks run in order and the first violation raises GamedayParseError.
    """
    try:
        gameday = json.loads(data)
    except ValueError as e:
        raise GamedayParseError("unable to parse gameday data") from e

    if not isinstance(gameday, dict):
        raise GamedayParseError("gameday data is not an object")

    if not isinstance(gameday.get("date"), str):
        raise GamedayParseError("gameday data does not have date")

    try:
        date = parse_date(gameday["date"])
    except ValueError as e:
        raise GamedayParseError("gameday data date is invalid") from e

    if not isinstance(gameday.get("games"), list):
        raise GamedayParseError("gameday data does not have games array")

    return Gameday(date=date, games=parse_gameday_games(gameday["games"], teams))
