from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Iterator

SENTENCE_PUNCTUATION = (".", "·", ",", "!", ":", ";")

# Punctuation outside ASCII that separates words.
_EXTRA_SEPARATORS = frozenset("·•–—")


def normalize(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def is_normalized(text: str) -> bool:
    return unicodedata.is_normalized("NFC", text)


def fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def accented_key(text: str) -> str:
    return normalize(text).strip().lower()


def ends_with_punctuation(text: str) -> bool:
    return text.endswith(SENTENCE_PUNCTUATION)


def sentence_trim(sentence: str) -> str | None:
    """Strip all trailing sentence punctuation, or return None if there is none."""
    trimmed = sentence
    while trimmed.endswith(SENTENCE_PUNCTUATION):
        trimmed = trimmed[:-1]
    if len(trimmed) == len(sentence):
        return None
    return trimmed


def is_word_separator(ch: str) -> bool:
    if ch in _EXTRA_SEPARATORS:
        return True
    return ch.isspace() or (ch.isascii() and not ch.isalnum())


def iter_words(sentence: str) -> Iterator[str]:
    start: int | None = None
    for idx, ch in enumerate(sentence):
        if is_word_separator(ch):
            if start is not None:
                yield sentence[start:idx]
                start = None
        elif start is None:
            start = idx
    if start is not None:
        yield sentence[start:]


def unique_words(sentences: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for sentence in sentences:
        for word in iter_words(sentence):
            seen.setdefault(word, None)
    return list(seen)
