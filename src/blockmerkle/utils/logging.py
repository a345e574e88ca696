import logging
from typing import Optional

ROOT_LOGGER = "blockmerkle"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """
    Attach a stderr handler to the blockmerkle logger.

    Library modules never call this; it is for entry points only.
    Calling it again only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    if not any(getattr(h, "_blockmerkle", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._blockmerkle = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
