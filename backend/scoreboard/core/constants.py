# upper bound on games returned by a single listing
MAX_GAMES = 100

TEAM_NAME_MAX_LENGTH = 64
TEAM_DESCRIPTION_MAX_LENGTH = 1000

MIN_SCORE = 0
MAX_SCORE = 99

# tables conditional_update is allowed to touch
UPDATABLE_TABLES = {"teams", "games"}
