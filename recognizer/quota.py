"""Daily usage quota gate.

The gate is an advisory, process-local limit: it counts successful
recognitions per calendar day and closes once the ceiling is reached. It is
not a security boundary and it is not atomic across concurrent callers; run
check-then-commit sequences under external serialization.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable

from recognizer.config import RECOGNIZER_DAILY_QUOTA

logger = logging.getLogger(__name__)


class QuotaDecision(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass
class UsageCounter:
    """Successful recognitions counted for one calendar day."""

    day: date
    count: int = 0


class UsageStore(ABC):
    """Persistence for the single usage counter."""

    @abstractmethod
    def load(self) -> UsageCounter | None:
        """Return the stored counter, or None if nothing is stored yet."""
        pass

    @abstractmethod
    def save(self, counter: UsageCounter) -> None:
        pass


class MemoryUsageStore(UsageStore):
    def __init__(self, counter: UsageCounter | None = None):
        self._counter = counter

    def load(self) -> UsageCounter | None:
        if self._counter is None:
            return None
        return UsageCounter(day=self._counter.day, count=self._counter.count)

    def save(self, counter: UsageCounter) -> None:
        self._counter = UsageCounter(day=counter.day, count=counter.count)


class FileUsageStore(UsageStore):
    """Keeps the counter in a small JSON file: {"day": "YYYY-MM-DD", "count": n}."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> UsageCounter | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return UsageCounter(day=date.fromisoformat(data["day"]), count=max(0, int(data["count"])))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable usage file {self.path}: {e}")
            return None

    def save(self, counter: UsageCounter) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"day": counter.day.isoformat(), "count": counter.count}),
            encoding="utf-8",
        )


class QuotaGate:
    """Open while today's count is below the ceiling, closed otherwise."""

    def __init__(
        self,
        store: UsageStore | None = None,
        ceiling: int = RECOGNIZER_DAILY_QUOTA,
        today: Callable[[], date] = date.today,
    ):
        if ceiling < 0:
            raise ValueError(f"Quota ceiling must be non-negative, got {ceiling}")
        self.store = store or MemoryUsageStore()
        self.ceiling = ceiling
        self._today = today

    def _current(self) -> UsageCounter:
        """Load today's counter, resetting it when the stored day has rolled over."""
        today = self._today()
        counter = self.store.load()
        if counter is None or counter.day != today:
            if counter is not None:
                logger.info(f"Usage counter reset for {today} (was {counter.count} on {counter.day})")
            counter = UsageCounter(day=today, count=0)
            self.store.save(counter)
        return counter

    def check_and_reserve(self) -> QuotaDecision:
        """Report whether another recognition may run today. Never increments."""
        counter = self._current()
        if counter.count >= self.ceiling:
            logger.info(f"Daily quota exhausted: {counter.count}/{self.ceiling} on {counter.day}")
            return QuotaDecision.DENIED
        return QuotaDecision.ALLOWED

    def commit(self) -> UsageCounter:
        """Record one successful recognition."""
        counter = self._current()
        counter.count += 1
        self.store.save(counter)
        logger.debug(f"Usage committed: {counter.count}/{self.ceiling} on {counter.day}")
        return counter

    def used(self) -> int:
        return self._current().count

    def remaining(self) -> int:
        return max(0, self.ceiling - self._current().count)

    def snapshot(self) -> dict:
        """Usage summary for display."""
        counter = self._current()
        return {
            "day": counter.day.isoformat(),
            "used": counter.count,
            "remaining": max(0, self.ceiling - counter.count),
            "limit": self.ceiling,
        }
