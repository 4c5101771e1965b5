"""A small xorshift generator for identifiers that carry no content meaning.

This is *not* cryptographically secure. Call :func:`seed` once at startup
when a predictable sequence is not wanted.
"""

from __future__ import annotations

import time

_MASK = 2**64 - 1
DEFAULT_STATE = 99


class XorShift64:
    def __init__(self, state: int = DEFAULT_STATE) -> None:
        self.state = DEFAULT_STATE
        self.seed(state)

    def seed(self, state: int) -> None:
        state &= _MASK
        # xorshift never leaves zero
        self.state = state or DEFAULT_STATE

    def random(self, limit: int) -> int:
        """Return a value in ``[0, limit)``."""
        if limit <= 0:
            return 0
        x = self.state
        x ^= (x << 13) & _MASK
        x ^= x >> 17
        x ^= (x << 5) & _MASK
        self.state = x
        return x % limit

    def random_u64(self) -> int:
        return self.random(_MASK)


_default = XorShift64()


def random(limit: int) -> int:
    return _default.random(limit)


def random_u64() -> int:
    return _default.random_u64()


def seed(value: int | None = None) -> None:
    _default.seed(int(time.time() * 1000) if value is None else value)


def reset() -> None:
    _default.seed(DEFAULT_STATE)
