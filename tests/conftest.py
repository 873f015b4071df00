import datetime as dt

import pytest


class FakeClock:
    """Deterministic stand-in for datetime.now."""

    def __init__(self, start: dt.datetime = dt.datetime(2024, 1, 2, 9, 30)) -> None:
        self.now = start

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs) -> dt.datetime:
        self.now = self.now + dt.timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
