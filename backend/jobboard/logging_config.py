import logging
import sys

APP_LOGGER = "jobboard"

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        from jobboard.config import settings

        level = settings.log_level
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: int | str | None = None) -> None:
    """
    Send log records to stdout. The jobboard package logs at the configured level
    (settings.log_level unless given); everything else stays at WARNING or above
    so slug retries and counter repairs are not buried in library output.
    """
    level = _resolve_level(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(max(level, logging.WARNING))

    logging.getLogger(APP_LOGGER).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
