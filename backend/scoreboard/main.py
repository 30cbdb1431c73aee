# Main FastAPI application
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from scoreboard.api import games, teams
from scoreboard.api.validation import RequestValidationFailed
from scoreboard.core.config import Settings
from scoreboard.db.database import Database
import logging

# for logging in fastapi
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

ROUTES = [
    {"href": "/teams", "methods": ["GET", "POST"]},
    {"href": "/teams/:slug", "methods": ["GET", "PATCH", "DELETE"]},
    {"href": "/games", "methods": ["GET", "POST"]},
    {"href": "/games/:id", "methods": ["GET", "DELETE"]},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings or Settings()
    app.state.settings = settings

    db = Database(settings.DATABASE_URL)
    db.open()
    if not await db.create_schema():
        logger.error("Unable to create database schema")
    app.state.db = db

    yield

    await db.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="Scoreboard API", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(teams.router, prefix="/teams", tags=["Teams"])
    app.include_router(games.router, prefix="/games", tags=["Games"])

    @app.exception_handler(RequestValidationFailed)
    async def validation_failed(request: Request, exc: RequestValidationFailed):
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": [asdict(e) for e in exc.errors]},
        )

    @app.get("/")
    def root():
        return ROUTES

    return app


app = create_app()
