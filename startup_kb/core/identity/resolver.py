"""
Identity resolution for startup entries.

Callers describe a program with whatever they have: a display name, an
executable path and/or a publisher. The resolver tries a fixed cascade of
lookups, most reliable first, and stops at the first hit:

0. extension   - browser extension id found in the executable path
1. executable  - executable file name contained in the entry's executable names
2. exact_name  - display name equals the entry name (case-insensitive)
3. alias       - display name contained in the entry aliases
4. base_name   - normalized display name contained in the entry name or aliases
5. publisher   - publisher contained in the entry publisher (generic publishers skipped)

Store errors are never swallowed: a failed lookup aborts the whole resolution
instead of falling through to the next strategy.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ...config import ResolverSettings
from ...errors import InvalidQuery
from ...models import KnowledgeEntry, Resolution
from .normalize import executable_file_name, extract_base_name, extract_extension_id

logger = logging.getLogger(__name__)

STRATEGY_EXTENSION = "extension"
STRATEGY_EXECUTABLE = "executable"
STRATEGY_EXACT_NAME = "exact_name"
STRATEGY_ALIAS = "alias"
STRATEGY_BASE_NAME = "base_name"
STRATEGY_PUBLISHER = "publisher"


class RecordStore(Protocol):
    """Read-only lookups the resolver and keyword search need from a store."""

    def find_by_executable(self, pattern: str) -> Optional[KnowledgeEntry]:
        ...

    def find_by_exact_name(self, name: str) -> Optional[KnowledgeEntry]:
        ...

    def find_by_alias(self, pattern: str) -> Optional[KnowledgeEntry]:
        ...

    def find_by_name_or_alias(self, pattern: str) -> Optional[KnowledgeEntry]:
        ...

    def find_by_publisher(self, pattern: str) -> Optional[KnowledgeEntry]:
        ...

    def search(self, pattern: str, limit: int) -> Sequence[KnowledgeEntry]:
        ...


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class KnowledgeResolver:
    def __init__(self, store: RecordStore, settings: Optional[ResolverSettings] = None) -> None:
        self.store = store
        self.settings = settings or ResolverSettings()

    def find_entry(
        self,
        name: Optional[str] = None,
        executable: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Optional[KnowledgeEntry]:
        """Return the best matching entry, or None when nothing matches."""
        return self.resolve(name, executable, publisher).entry

    def resolve(
        self,
        name: Optional[str] = None,
        executable: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Resolution:
        """
        Run the resolution cascade and report which strategy matched.

        Raises:
            InvalidQuery: name, executable and publisher are all empty
            StoreUnavailable: the store failed during any lookup
        """
        name = _clean(name)
        executable = _clean(executable)
        publisher = _clean(publisher)
        if not (name or executable or publisher):
            raise InvalidQuery("name, executable or publisher is required")

        if executable:
            resolution = self._match_executable(executable)
            if resolution.found:
                return resolution
        if name:
            resolution = self._match_name(name)
            if resolution.found:
                return resolution
        if publisher:
            resolution = self._match_publisher(publisher)
            if resolution.found:
                return resolution
        logger.debug(
            "No knowledge entry for name=%r executable=%r publisher=%r",
            name,
            executable,
            publisher,
        )
        return Resolution()

    def _match_executable(self, executable: str) -> Resolution:
        if self.settings.match_browser_extensions:
            extension_id = extract_extension_id(executable)
            if extension_id:
                entry = self.store.find_by_alias(extension_id)
                if entry:
                    return self._hit(STRATEGY_EXTENSION, entry, extension_id)

        file_name = executable_file_name(executable)
        if len(file_name) < self.settings.min_executable_length:
            return Resolution()
        entry = self.store.find_by_executable(file_name)
        if entry:
            return self._hit(STRATEGY_EXECUTABLE, entry, file_name)
        return Resolution()

    def _match_name(self, name: str) -> Resolution:
        entry = self.store.find_by_exact_name(name)
        if entry:
            return self._hit(STRATEGY_EXACT_NAME, entry, name)

        entry = self.store.find_by_alias(name)
        if entry:
            return self._hit(STRATEGY_ALIAS, entry, name)

        base_name = extract_base_name(name)
        if len(base_name) < self.settings.min_base_name_length or base_name == name:
            return Resolution()
        entry = self.store.find_by_name_or_alias(base_name)
        if entry:
            return self._hit(STRATEGY_BASE_NAME, entry, base_name)
        return Resolution()

    def _match_publisher(self, publisher: str) -> Resolution:
        if self.is_generic_publisher(publisher):
            logger.debug("Skipping generic publisher %r", publisher)
            return Resolution()
        entry = self.store.find_by_publisher(publisher)
        if entry:
            return self._hit(STRATEGY_PUBLISHER, entry, publisher)
        return Resolution()

    def is_generic_publisher(self, publisher: str) -> bool:
        folded = publisher.strip().casefold()
        if any(folded == ignored.casefold() for ignored in self.settings.ignored_publishers):
            return True
        return any(marker.casefold() in folded for marker in self.settings.generic_publisher_markers)

    @staticmethod
    def _hit(strategy: str, entry: KnowledgeEntry, key: str) -> Resolution:
        logger.debug("Matched %r via %s (%r)", entry.name, strategy, key)
        return Resolution(entry=entry, strategy=strategy)
