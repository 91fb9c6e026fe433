from __future__ import annotations

from typing import List, Optional

from ..models import KnowledgeEntry
from .identity.resolver import RecordStore

DEFAULT_SEARCH_LIMIT = 20


class KeywordSearch:
    """
    Interactive lookup over name, aliases, publisher, short description and tags.

    Results are ordered by name (case-insensitive) and capped at ``limit``.
    An empty keyword matches every entry.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def search(self, keyword: Optional[str], limit: int = DEFAULT_SEARCH_LIMIT) -> List[KnowledgeEntry]:
        if limit <= 0:
            return []
        return list(self.store.search(keyword or "", limit))
