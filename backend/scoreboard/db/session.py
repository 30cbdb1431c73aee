from fastapi import Request

from scoreboard.db.database import Database


# the database is built once in the app lifespan and handed out per request
def get_db(request: Request) -> Database:
    return request.app.state.db
