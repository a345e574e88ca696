import pytest

from blockmerkle.core.digest import Hasher
from blockmerkle.core.settings import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from BLOCKMERKLE_* variables in the environment."""
    monkeypatch.delenv("BLOCKMERKLE_HASH_ALGORITHM", raising=False)
    monkeypatch.delenv("BLOCKMERKLE_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def hasher():
    return Hasher("sha256")


@pytest.fixture
def transactions():
    return [b"transaction1", b"transaction2", b"transaction3", b"transaction4"]
