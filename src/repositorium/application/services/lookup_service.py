from __future__ import annotations

from collections.abc import Iterable

from repositorium.core.errors import QueryEmptyError, QueryEncodingError, QueryTooLongError
from repositorium.core.text import accented_key, ends_with_punctuation, normalize
from repositorium.domain.models.catalog import Catalog
from repositorium.domain.models.resource import Resource, SearchCategory

MAX_QUERY_BYTES = 255


class LookupService:
    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def lookup(
        self,
        query: str | bytes,
        category: SearchCategory = SearchCategory.ANY,
        allow_partial: bool = False,
    ) -> list[Resource]:
        """Return resources with a name that matches ``query`` exactly.

        Accent-exact matches win over accent-folded ones, and prefix matches
        are only tried when both are empty and ``allow_partial`` is set. A
        query ending in sentence punctuation falls back to the query without
        it. Use :meth:`search` to find single words inside names.
        """
        text = _decode_query(query)
        if not text:
            return []
        normalized = _normalize_query(text)
        return list(self._lookup_normalized(normalized, category, allow_partial).values())

    def _lookup_normalized(
        self,
        query: str,
        category: SearchCategory,
        allow_partial: bool,
    ) -> dict[int, Resource]:
        hits = self.catalog.by_name.lookup(query)
        results: dict[int, Resource] = {}

        _collect(results, hits.exact_accented, category)
        if not results:
            _collect(results, hits.exact_unaccented, category)
        if not results and allow_partial:
            _collect(results, hits.partial, category)

        if not results and ends_with_punctuation(query):
            trimmed = query[:-1]
            if accented_key(trimmed):
                return self._lookup_normalized(trimmed, category, allow_partial)
        return results

    def lookup_one(
        self,
        query: str | bytes,
        category: SearchCategory = SearchCategory.ANY,
    ) -> Resource | None:
        results = self.lookup(query, category, allow_partial=False)
        return results[0] if results else None

    def search(
        self,
        keywords: Iterable[str],
        category: SearchCategory = SearchCategory.ANY,
    ) -> list[Resource]:
        """Return resources whose names contain any of ``keywords`` as a word."""
        results: dict[int, Resource] = {}
        for keyword in keywords:
            word = normalize(_decode_query(keyword)).strip()
            if not word:
                continue
            hits = self.catalog.by_word.lookup(word)
            _collect(results, hits.exact_accented, category)
            if not results:
                _collect(results, hits.exact_unaccented, category)
        return list(results.values())


def _collect(results: dict[int, Resource], candidates: list[Resource], category: SearchCategory) -> None:
    for resource in candidates:
        if category.matches(resource.kind):
            results.setdefault(resource.id, resource)


def _decode_query(query: str | bytes) -> str:
    if isinstance(query, bytes):
        try:
            return query.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise QueryEncodingError(f"Query is not valid UTF-8: {query!r}") from exc
    try:
        query.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise QueryEncodingError(f"Query is not valid UTF-8: {query!r}") from exc
    return query


def _normalize_query(text: str) -> str:
    normalized = normalize(text).strip()
    if not normalized:
        raise QueryEmptyError("Query is empty")
    if len(normalized.encode("utf-8")) > MAX_QUERY_BYTES:
        raise QueryTooLongError(f"Query is longer than {MAX_QUERY_BYTES} bytes")
    return normalized
