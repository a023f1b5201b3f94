from pathlib import Path


DEFAULT_PLAYERS_PER_ROUND = 4
DEFAULT_RESHUFFLE_ATTEMPTS = 200
DEFAULT_BACKTRACK_DEADLINE_MILLIS = 200
PRUNE_FREQUENCY_THRESHOLD = 1000

ROUND_INTERVAL_DAYS = 7

PLANNER_CONFIG_FILE_PATH = Path("planner_config.json")
PLANNER_CONFIG_ENV = "PLANNER_CONFIG_FILE"

EXPORT_DIR = Path("build") / "tmp"
EXPORT_DIR_ENV = "PLANNER_EXPORT_DIR"
EXPORT_MEDIA_TYPE = "application/vnd.ms-excel"

LOG_LEVEL = "INFO"
LOG_FMT = "LVL: %(levelname)s | %(name)s | FUN: %(funcName)s | msg: %(message)s"

API_PREFIX = "/planer"
