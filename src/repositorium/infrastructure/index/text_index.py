from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from repositorium.core.text import accented_key, fold_accents

V = TypeVar("V")


@dataclass(slots=True)
class TextIndexResult(Generic[V]):
    exact_accented: list[V] = field(default_factory=list)
    exact_unaccented: list[V] = field(default_factory=list)
    partial: list[V] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.exact_accented or self.exact_unaccented or self.partial)


class TextIndex(Generic[V]):
    """Case-insensitive index with accent-exact, accent-folded and prefix tiers.

    Keys are lower-cased NFC text. The folded tier compares keys with all
    combining marks removed; the partial tier holds every value whose key
    (accented or folded) starts with the query.
    """

    def __init__(self) -> None:
        self._accented: dict[str, list[V]] = {}
        self._unaccented: dict[str, list[V]] = {}
        self._sorted_keys: list[str] = []

    def __len__(self) -> int:
        return len(self._accented)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and accented_key(key) in self._accented

    def add(self, key: str, value: V) -> None:
        accented = accented_key(key)
        if not accented:
            raise ValueError("TextIndex keys must not be empty")
        bucket = self._accented.get(accented)
        if bucket is None:
            bucket = self._accented[accented] = []
            self._insert_sorted(accented)
        _append_unique(bucket, value)

        unaccented = fold_accents(accented)
        _append_unique(self._unaccented.setdefault(unaccented, []), value)
        if unaccented != accented:
            self._insert_sorted(unaccented)

    def get(self, key: str) -> list[V]:
        return list(self._accented.get(accented_key(key), ()))

    def lookup(self, key: str) -> TextIndexResult[V]:
        accented = accented_key(key)
        result: TextIndexResult[V] = TextIndexResult()
        if not accented:
            return result
        unaccented = fold_accents(accented)
        result.exact_accented = list(self._accented.get(accented, ()))
        result.exact_unaccented = list(self._unaccented.get(unaccented, ()))
        for prefix in dict.fromkeys((accented, unaccented)):
            for candidate in self._keys_with_prefix(prefix):
                for value in self._accented.get(candidate, ()):
                    _append_unique(result.partial, value)
                for value in self._unaccented.get(candidate, ()):
                    _append_unique(result.partial, value)
        return result

    def _insert_sorted(self, key: str) -> None:
        idx = bisect.bisect_left(self._sorted_keys, key)
        if idx == len(self._sorted_keys) or self._sorted_keys[idx] != key:
            self._sorted_keys.insert(idx, key)

    def _keys_with_prefix(self, prefix: str) -> list[str]:
        start = bisect.bisect_left(self._sorted_keys, prefix)
        out: list[str] = []
        for candidate in self._sorted_keys[start:]:
            if not candidate.startswith(prefix):
                break
            out.append(candidate)
        return out


def _append_unique(bucket: list, value: object) -> None:
    if not any(item is value for item in bucket):
        bucket.append(value)
