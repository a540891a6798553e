import logging
import sys

LOGGER_NAME = "flashcard_engine"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logging(level: str = "info", stream=None) -> logging.Logger:
    """Attach a single stream handler to the engine logger.

    Calling it again only changes the level, so repeated setup from tests or
    entry points does not duplicate output.
    """
    resolved = _LEVELS.get(str(level).lower())
    if resolved is None:
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    if not any(getattr(h, "_flashcard_engine", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._flashcard_engine = True
        logger.addHandler(handler)
    logger.propagate = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
