from collections.abc import Iterator

import pytest

from pathresolver.core.config import ConfigManager
from pathresolver.core.env import Env
from pathresolver.util.log import Log


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def config_context() -> Iterator[None]:
    token = ConfigManager.provide(ConfigManager())
    try:
        yield
    finally:
        ConfigManager.restore(token)


@pytest.fixture(autouse=True)
def _env_and_log_teardown() -> Iterator[None]:
    Env.reset()
    yield
    Env.reset()
    Log.reset()
