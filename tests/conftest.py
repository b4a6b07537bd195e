import pytest
from datetime import datetime, timedelta
from prompt_vault.services import PromptStore


class FakeClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def store(tmp_path, clock):
    """Create a fresh prompt database for each test."""
    store = PromptStore.open(f"sqlite:///{tmp_path / 'prompts.db'}", clock=clock)
    yield store
    store.close()
