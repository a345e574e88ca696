from .json import json_dumps, json_loads
from .logging import configure_logging, get_logger

__all__ = ["json_dumps", "json_loads", "configure_logging", "get_logger"]
