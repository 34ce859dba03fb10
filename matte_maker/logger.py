import logging
import os
import sys

BASE_LOGGER_NAME = "matte_maker"
LEVEL_ENV = "MATTE_MAKER_LOG_LEVEL"
CATEGORIES_ENV = "MATTE_MAKER_LOG_CATS"

# Logger names are not printed; categories are selected with MATTE_MAKER_LOG_CATS instead.
LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class CategoryFilter(logging.Filter):
    """Pass records whose last logger-name component is an allowed category.

    ``matte_maker.render_worker`` has category ``render_worker``.
    """

    def __init__(self, allowed: set[str]):
        super().__init__()
        self.allowed = allowed

    def filter(self, record: logging.LogRecord) -> bool:
        return (record.name or "").rsplit(".", 1)[-1] in self.allowed


def _level_from_env(default: int) -> int:
    value = (os.getenv(LEVEL_ENV) or "").strip().lower()
    return _LEVELS.get(value, default)


def _categories_from_env() -> set[str]:
    raw = os.getenv(CATEGORIES_ENV) or ""
    return {c.strip() for c in raw.split(",") if c.strip()}


def _stderr_handler(logger: logging.Logger) -> logging.StreamHandler:
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            return h
    handler = logging.StreamHandler(stream=sys.stderr)
    logger.addHandler(handler)
    return handler


def setup_logger(level: int = logging.INFO, name: str = BASE_LOGGER_NAME) -> logging.Logger:
    """Create or update the project logger.

    Environment overrides are re-read on every call, so options parsed late
    from the command line still apply. The base logger keeps exactly one
    stderr handler whose formatter and category filter are refreshed in place.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level_from_env(level))

    handler = _stderr_handler(logger)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    handler.filters.clear()
    categories = _categories_from_env()
    if categories:
        handler.addFilter(CategoryFilter(categories))

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = setup_logger()
    return base if not name else base.getChild(name)
