import time

import pytest


@pytest.fixture
def utc(monkeypatch):
    """Pin the local timezone to UTC for timestamp assertions"""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
