import logging
from typing import Union


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        mapping = logging.getLevelNamesMapping()
        return int(mapping.get(level.upper(), logging.INFO))
    return int(level)


class ConsoleHandler(logging.StreamHandler):
    """Console handler attached by :func:`configure_logging`."""


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Configure the ``accounting_app`` logger hierarchy.

    Safe to call more than once: the console handler is only attached the
    first time.
    """
    logger = logging.getLogger("accounting_app")
    logger.setLevel(_as_level(level))

    if not any(isinstance(h, ConsoleHandler) for h in logger.handlers):
        handler = ConsoleHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
