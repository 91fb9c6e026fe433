from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .config import Settings
from .core.identity import KnowledgeResolver
from .core.search import DEFAULT_SEARCH_LIMIT, KeywordSearch
from .models import KnowledgeCategory, KnowledgeEntry, Resolution
from .seed import seed_if_empty
from .store import KnowledgeStore


@dataclass
class KnowledgeService:
    settings: Settings
    store: KnowledgeStore
    resolver: KnowledgeResolver
    keyword_search: KeywordSearch

    @classmethod
    def create(cls, settings: Settings, *, seed: Optional[bool] = None) -> "KnowledgeService":
        store = KnowledgeStore(settings.store.path)
        service = cls.from_store(settings, store)
        should_seed = settings.store.seed_on_start if seed is None else seed
        if should_seed:
            try:
                seed_if_empty(store, settings.store.resolved_seed_path())
            except Exception:
                store.close()
                raise
        return service

    @classmethod
    def from_store(cls, settings: Settings, store: KnowledgeStore) -> "KnowledgeService":
        return cls(
            settings=settings,
            store=store,
            resolver=KnowledgeResolver(store, settings.resolver),
            keyword_search=KeywordSearch(store),
        )

    def find_entry(
        self,
        name: Optional[str] = None,
        executable: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Optional[KnowledgeEntry]:
        return self.resolver.find_entry(name, executable, publisher)

    def resolve(
        self,
        name: Optional[str] = None,
        executable: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Resolution:
        return self.resolver.resolve(name, executable, publisher)

    def search(self, keyword: Optional[str], limit: int = DEFAULT_SEARCH_LIMIT) -> List[KnowledgeEntry]:
        return self.keyword_search.search(keyword, limit)

    def get_by_category(self, category: KnowledgeCategory | str) -> List[KnowledgeEntry]:
        return self.store.get_by_category(category)

    def count(self) -> int:
        return self.store.count()

    def save_entry(self, entry: KnowledgeEntry) -> int:
        return self.store.save_entry(entry)

    def close(self) -> None:
        self.store.close()
