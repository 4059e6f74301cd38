"""
Vizr logging bootstrap.

The player logs scene swaps, demo fallbacks, normalization traces and
per-layer draw failures; those records end up in `vizr.log` under the
per-user data directory and on the console. Headless callers (tests, scripts) can
skip the file with `to_file=False`.
"""
from __future__ import annotations
import logging, logging.handlers
from app_config import APP_NAME, COMPANY_NAME, LOG_DIR

LOG_FILE = LOG_DIR / f"{APP_NAME.lower()}.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 10_000_000
LOG_BACKUPS = 5


def setup_logging(level: int = logging.INFO, to_file: bool = True) -> logging.Logger:
    """
    Configure the root logger for the player. Safe to call again (e.g. when
    --debug flips the level); existing handlers are replaced, not stacked.
    """
    logger = logging.getLogger()  # root
    logger.setLevel(level)

    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    # Rotating vizr.log next to the settings
    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(level)
    logger.addHandler(ch)

    logger.info("%s logging initialised • %s • %s", APP_NAME, COMPANY_NAME, LOG_FILE if to_file else "console only")
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Module logger, e.g. get_logger(__name__) -> "vizr.core.playback".
    Without a name it returns the app-wide "Vizr" logger.
    """
    return logging.getLogger(name or APP_NAME)
