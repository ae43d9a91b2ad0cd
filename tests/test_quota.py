"""Tests for the daily usage quota gate."""
import json
from datetime import date, timedelta

import pytest

from recognizer.quota import (
    FileUsageStore,
    MemoryUsageStore,
    QuotaDecision,
    QuotaGate,
    UsageCounter,
)


class FakeClock:
    """Controllable date source."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock(date(2026, 3, 14))


@pytest.fixture
def gate(clock):
    return QuotaGate(MemoryUsageStore(), ceiling=5, today=clock)


def test_fresh_gate_is_open(gate):
    """Test first use creates a zero counter and allows recognition."""
    assert gate.check_and_reserve() is QuotaDecision.ALLOWED
    assert gate.remaining() == 5


def test_check_does_not_consume(gate):
    """Test check_and_reserve is a read, not an increment."""
    for _ in range(10):
        gate.check_and_reserve()

    assert gate.used() == 0


def test_gate_closes_at_ceiling(gate):
    """Test the sixth check after five commits is denied."""
    for _ in range(5):
        assert gate.check_and_reserve() is QuotaDecision.ALLOWED
        gate.commit()

    assert gate.check_and_reserve() is QuotaDecision.DENIED
    assert gate.remaining() == 0


def test_day_rollover_reopens(gate, clock):
    """Test a new calendar day resets the counter regardless of prior count."""
    for _ in range(7):
        gate.commit()
    assert gate.check_and_reserve() is QuotaDecision.DENIED

    clock.advance()

    assert gate.check_and_reserve() is QuotaDecision.ALLOWED
    assert gate.used() == 0


def test_commit_after_rollover_starts_at_one(gate, clock):
    """Test committing on a new day counts from zero."""
    gate.commit()
    gate.commit()
    clock.advance()

    counter = gate.commit()

    assert counter.day == clock.today
    assert counter.count == 1


def test_zero_ceiling_is_always_closed(clock):
    """Test a zero allowance denies immediately."""
    gate = QuotaGate(MemoryUsageStore(), ceiling=0, today=clock)

    assert gate.check_and_reserve() is QuotaDecision.DENIED


def test_negative_ceiling_rejected(clock):
    """Test a negative ceiling is a configuration mistake."""
    with pytest.raises(ValueError):
        QuotaGate(MemoryUsageStore(), ceiling=-1, today=clock)


def test_snapshot(gate, clock):
    """Test usage summary for display."""
    gate.commit()

    assert gate.snapshot() == {"day": "2026-03-14", "used": 1, "remaining": 4, "limit": 5}


def test_memory_store_returns_copies():
    """Test callers cannot mutate the stored counter in place."""
    store = MemoryUsageStore(UsageCounter(day=date(2026, 1, 1), count=2))

    loaded = store.load()
    loaded.count = 99

    assert store.load().count == 2


def test_file_store_round_trip(tmp_path, clock):
    """Test the file store persists the counter across gate instances."""
    path = tmp_path / "state" / "usage.json"
    gate = QuotaGate(FileUsageStore(path), ceiling=5, today=clock)
    gate.commit()
    gate.commit()

    reopened = QuotaGate(FileUsageStore(path), ceiling=5, today=clock)

    assert reopened.used() == 2
    assert json.loads(path.read_text()) == {"day": "2026-03-14", "count": 2}


def test_file_store_corrupt_file_reads_as_fresh(tmp_path, clock):
    """Test an unreadable usage file does not block recognition."""
    path = tmp_path / "usage.json"
    path.write_text("not json")
    gate = QuotaGate(FileUsageStore(path), ceiling=5, today=clock)

    assert gate.check_and_reserve() is QuotaDecision.ALLOWED
    assert gate.used() == 0


def test_file_store_missing_file(tmp_path):
    """Test a missing file loads as nothing stored."""
    assert FileUsageStore(tmp_path / "absent.json").load() is None
