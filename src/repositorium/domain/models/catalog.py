from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from repositorium.core.text import unique_words
from repositorium.core.uid import encode_uid
from repositorium.domain.models.resource import Resource
from repositorium.infrastructure.index.text_index import TextIndex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Catalog:
    """Owns every loaded resource and the indices that reach them.

    A catalog is filled from a resource folder or a bundle. Nothing is
    released individually; dropping the catalog drops everything.
    """

    by_id: dict[int, Resource] = field(default_factory=dict)
    by_word: TextIndex[Resource] = field(default_factory=TextIndex)
    by_name: TextIndex[Resource] = field(default_factory=TextIndex)
    folder: Path | None = None
    bundle_path: Path | None = None
    used_resources: list[Resource] | None = None

    def __len__(self) -> int:
        return len(self.by_id)

    def __iter__(self):
        return iter(self.by_id.values())

    def get(self, uid: int) -> Resource | None:
        return self.by_id.get(uid)

    def index_resource(self, resource: Resource, origin: str = "") -> bool:
        """Add ``resource`` to every index. The first resource with an id wins."""
        if resource.id in self.by_id:
            logger.error(
                "Duplicated uid %s (%s) in %s, keeping the first one",
                encode_uid(resource.id),
                resource.id,
                origin or resource.label,
            )
            return False
        self.by_id[resource.id] = resource

        for name in resource.names:
            if name.strip():
                self.by_name.add(name, resource)

        words = [word for word in unique_words(resource.names) if word]
        if not words:
            logger.warning("Resource %s has no indexable words", encode_uid(resource.id))
        for word in words:
            self.by_word.add(word, resource)
        return True

    def track_usage(self) -> None:
        if self.used_resources is None:
            self.used_resources = []

    def record_use(self, resource: Resource) -> None:
        if self.used_resources is None:
            return
        if any(item.id == resource.id for item in self.used_resources):
            return
        self.used_resources.append(resource)
