import logging
import os
import sys

LOG_LEVEL_ENV = "SPOPIFY_LOG_LEVEL"


def _level_from_env(default: int) -> int:
    name = os.getenv(LOG_LEVEL_ENV)
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging for the API process.

    - one stdout handler, "time [LEVEL] logger - message"
    - SPOPIFY_LOG_LEVEL overrides `level` (e.g. "DEBUG")
    - if uvicorn or a test runner already installed handlers, only the
      level is adjusted
    """
    level = _level_from_env(level)
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(level)
