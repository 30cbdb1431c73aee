import logging
import sys

import uvicorn
from pydantic import ValidationError

from scoreboard.core.config import Settings
from scoreboard.main import create_app

logger = logging.getLogger(__name__)


def main():
    try:
        settings = Settings()
    except ValidationError as e:
        logger.error(f"Environment is not configured correctly: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.LOG_LEVEL)
    logger.info(f"Server running at http://{settings.HOST}:{settings.PORT}/")
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
