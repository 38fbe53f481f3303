from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Wall-clock time."""

    def now(self) -> float:
        return time.time()


@dataclass(slots=True)
class FixedClock:
    """
    A clock that only moves when told to.

    Handy for tests and for replaying validation at a known instant.
    """
    current: float

    def __init__(self, current: Union[int, float, datetime]) -> None:
        if isinstance(current, datetime):
            if current.tzinfo is None:
                current = current.replace(tzinfo=timezone.utc)
            current = current.timestamp()
        self.current = float(current)

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds
