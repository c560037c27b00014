from datetime import datetime, timedelta, timezone

import pytest

T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock so simulation tests never depend on wall time."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, minutes: float) -> datetime:
        self.current = self.current + timedelta(minutes=minutes)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
