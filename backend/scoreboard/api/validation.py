"""
Request validation and sanitization.

Each endpoint declares a ``RequestPipeline``: a list of validators that run
in order and collect ``FieldError``s, the fields to strip of HTML before the
errors are checked, and the fields to trim and escape afterwards. The
pipeline is used as a FastAPI dependency and hands the cleaned body to the
route.
"""
import html
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable

import bleach
from fastapi import Depends, HTTPException, Request

from scoreboard.core.constants import (
    MAX_SCORE,
    MIN_SCORE,
    TEAM_DESCRIPTION_MAX_LENGTH,
    TEAM_NAME_MAX_LENGTH,
)
from scoreboard.db.database import Database
from scoreboard.db.results import Failed
from scoreboard.db.session import get_db
from scoreboard.db.store_teams import get_team, get_teams, team_slug
from scoreboard.schemas import Team
from scoreboard.services.parse import parse_date

# reserved messages that change the response status
NOT_FOUND_MESSAGE = "not found"
SERVER_ERROR_MESSAGE = "server error"

INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class FieldError:
    field: str
    message: str


def validation_status(errors: list[FieldError]) -> int:
    messages = {e.message for e in errors}
    if SERVER_ERROR_MESSAGE in messages:
        return 500
    if NOT_FOUND_MESSAGE in messages:
        return 404
    return 400


class RequestValidationFailed(Exception):
    def __init__(self, errors: list[FieldError]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors

    @property
    def status_code(self) -> int:
        return validation_status(self.errors)


Validator = Callable[[dict, Database, list[FieldError]], Awaitable[None]]


# Sanitizers
def xss_clean(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return bleach.clean(value, tags=set(), strip=True)


def escape(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    # bleach output is already entity encoded, don't encode it twice
    return html.escape(html.unescape(value.strip()), quote=True)


def _sanitize(body: dict, fields: Iterable[str], sanitizer) -> None:
    for field in fields:
        if field in body:
            body[field] = sanitizer(body[field])


# Validators
def string_validator(
    field: str,
    value_required: bool = True,
    max_length: int = 0,
    optional: bool = False,
) -> Validator:
    """
    Trim `field` in place and check it is a string within the length limits.
    Optional fields may be missing or null.
    """
    message = " ".join(
        part
        for part in (
            field,
            "required" if value_required else "",
            f"max {max_length} characters" if max_length else "",
        )
        if part
    )

    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        value = body.get(field)
        if value is None:
            if optional:
                return
            value = ""

        if not isinstance(value, str):
            errors.append(FieldError(field, message))
            return

        value = value.strip()
        body[field] = value

        too_short = value_required and not value
        too_long = max_length and len(value) > max_length
        if too_short or too_long:
            errors.append(FieldError(field, message))

    return validate


async def team_does_not_exist_validator(
    body: dict, db: Database, errors: list[FieldError]
) -> None:
    name = body.get("name")
    if not isinstance(name, str) or not name:
        return

    team = await get_team(db, team_slug(name))
    if isinstance(team, Failed):
        errors.append(FieldError("name", SERVER_ERROR_MESSAGE))
    elif isinstance(team, Team):
        errors.append(FieldError("name", "team with name already exists"))


def at_least_one_body_value_validator(fields: list[str]) -> Validator:
    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        if not any(body.get(field) is not None for field in fields):
            errors.append(
                FieldError("body", f"require at least one value of: {', '.join(fields)}")
            )

    return validate


def date_validator(field: str = "date") -> Validator:
    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        value = body.get(field)
        if isinstance(value, str):
            value = value.strip()
            body[field] = value
            try:
                parse_date(value)
                return
            except ValueError:
                pass
        errors.append(FieldError(field, "date must be a valid date"))

    return validate


def _as_id(value: Any) -> str | None:
    # ids may arrive as numbers or numeric strings
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return None


def teams_differ_validator(home: str = "home", away: str = "away") -> Validator:
    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        if _as_id(body.get(home)) == _as_id(body.get(away)):
            errors.append(FieldError(home, "home and away teams must be different"))

    return validate


def team_exists_validator(field: str, message: str) -> Validator:
    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        teams = await get_teams(db)
        if isinstance(teams, Failed):
            errors.append(FieldError(field, SERVER_ERROR_MESSAGE))
            return

        if _as_id(body.get(field)) not in {str(t.id) for t in teams}:
            errors.append(FieldError(field, message))

    return validate


def is_int_in_range(value: Any, minimum: int, maximum: int) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and INT_PATTERN.fullmatch(value.strip()):
        value = int(value.strip())
    return isinstance(value, int) and minimum <= value <= maximum


def score_validator(field: str, message: str) -> Validator:
    async def validate(body: dict, db: Database, errors: list[FieldError]) -> None:
        if not is_int_in_range(body.get(field), MIN_SCORE, MAX_SCORE):
            errors.append(FieldError(field, message))

    return validate


async def read_json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="request body must be valid JSON")

    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="request body must be a JSON object")
    return body


class RequestPipeline:
    """
    validators -> xss sanitizing -> error check -> trim/escape -> route
    """

    def __init__(
        self,
        validators: list[Validator],
        xss_fields: Iterable[str] = (),
        escape_fields: Iterable[str] = (),
    ):
        self.validators = validators
        self.xss_fields = list(xss_fields)
        self.escape_fields = list(escape_fields)

    async def __call__(self, request: Request, db: Database = Depends(get_db)) -> dict:
        body = await read_json_body(request)

        errors: list[FieldError] = []
        for validator in self.validators:
            await validator(body, db, errors)

        _sanitize(body, self.xss_fields, xss_clean)

        if errors:
            raise RequestValidationFailed(errors)

        _sanitize(body, self.escape_fields, escape)
        return body


# Per endpoint rule sets
TEAM_FIELDS = ["name", "description"]
GAME_FIELDS = ["date", "home", "away", "home_score", "away_score"]

create_team_pipeline = RequestPipeline(
    validators=[
        string_validator("name", max_length=TEAM_NAME_MAX_LENGTH),
        string_validator(
            "description", value_required=False, max_length=TEAM_DESCRIPTION_MAX_LENGTH
        ),
        team_does_not_exist_validator,
    ],
    xss_fields=TEAM_FIELDS,
    escape_fields=TEAM_FIELDS,
)

update_team_pipeline = RequestPipeline(
    validators=[
        string_validator("name", max_length=TEAM_NAME_MAX_LENGTH, optional=True),
        string_validator(
            "description",
            value_required=False,
            max_length=TEAM_DESCRIPTION_MAX_LENGTH,
            optional=True,
        ),
        at_least_one_body_value_validator(TEAM_FIELDS),
    ],
    xss_fields=TEAM_FIELDS,
    escape_fields=TEAM_FIELDS,
)

create_game_pipeline = RequestPipeline(
    validators=[
        date_validator("date"),
        teams_differ_validator("home", "away"),
        team_exists_validator("home", "home team must be valid"),
        team_exists_validator("away", "away team must be valid"),
        score_validator(
            "home_score",
            f"home_score must be an integer from {MIN_SCORE} to {MAX_SCORE}",
        ),
        score_validator(
            "away_score",
            f"away_score must be an integer from {MIN_SCORE} to {MAX_SCORE}",
        ),
    ],
    xss_fields=GAME_FIELDS,
    escape_fields=GAME_FIELDS,
)
