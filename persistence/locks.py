from __future__ import annotations

import threading

DEFAULT_STRIPES = 64


class KeyLockRegistry:
    """
    Maps storage keys onto a fixed pool of locks.

    Keys that share a stripe briefly serialize; the pool never grows, however
    many distinct keys are touched. Locks guard a single backend call; nothing
    holds one across a read-decide-write sequence.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES) -> None:
        if stripes < 1:
            raise ValueError("stripes must be >= 1")
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def __len__(self) -> int:
        return len(self._locks)
