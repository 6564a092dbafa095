import time

import pytest


@pytest.fixture
def west_of_utc(monkeypatch):
    """Run the test with local time five hours behind UTC."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available")
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
