"""
Caller-owned emotion history.
"""
from __future__ import annotations
from collections import deque
from typing import Deque, Iterable, Optional, Tuple

from companion.models import EmotionReading


class EmotionHistory:
    """
    Append-only sequence of readings, optionally bounded.

    The owner appends; analyzers only ever see `snapshot()`, an immutable
    tuple, so nothing downstream can mutate the history.
    """

    def __init__(self, maxlen: Optional[int] = None, readings: Iterable[EmotionReading] = ()):
        self._items: Deque[EmotionReading] = deque(readings, maxlen=maxlen)

    @property
    def maxlen(self) -> Optional[int]:
        return self._items.maxlen

    def append(self, reading: EmotionReading) -> None:
        self._items.append(reading)

    def snapshot(self) -> Tuple[EmotionReading, ...]:
        return tuple(self._items)

    def latest(self) -> Optional[EmotionReading]:
        return self._items[-1] if self._items else None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self.snapshot())
