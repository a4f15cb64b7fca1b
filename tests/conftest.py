from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from debuk.aggregator import get_aggregator
from debuk.deferred import get_deferred_queue
from debuk.options import get_settings

OPERATIONS = ("log", "count", "time", "time_end", "trace", "profile", "profile_end", "warn")


def mock_console(*operations: str) -> SimpleNamespace:
    """Console exposing a ``Mock`` for each of ``operations`` (all of them by default)."""
    return SimpleNamespace(**{op: Mock(name=op) for op in operations or OPERATIONS})


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def console() -> SimpleNamespace:
    return mock_console()


@pytest.fixture
def make_console():
    return mock_console


@pytest.fixture(autouse=True)
def reset_debuk_state():
    """Reset process-wide debuk state around each test.

    The count ledger, the deferred queue and the cached settings are shared by
    every wrapped unit in the process, so a test that leaves a flush pending
    would otherwise report into the next one.
    """
    get_aggregator().reset()
    get_deferred_queue().clear()
    get_settings.cache_clear()

    yield

    get_aggregator().reset()
    get_deferred_queue().clear()
    get_settings.cache_clear()
