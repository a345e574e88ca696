from .digest import (
    DEFAULT_ALGORITHM,
    SUPPORTED_ALGORITHMS,
    Hasher,
    default_hasher,
    get_hasher,
    normalize_algorithm,
)
from .settings import Settings, get_settings

__all__ = [
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "Hasher",
    "default_hasher",
    "get_hasher",
    "normalize_algorithm",
    "Settings",
    "get_settings",
]
