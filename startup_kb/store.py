from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Iterable, List, Optional, Sequence

from .config import MEMORY_STORE
from .errors import InvalidEntry, StoreUnavailable
from .models import KnowledgeCategory, KnowledgeEntry, SafetyLevel

logger = logging.getLogger(__name__)

COLUMNS = (
    "id",
    "name",
    "aliases",
    "publisher",
    "executable_names",
    "category",
    "safety_level",
    "short_description",
    "full_description",
    "disable_impact",
    "performance_impact",
    "recommendation",
    "info_url",
    "tags",
    "last_updated",
)
SELECT_ENTRY = f"SELECT {', '.join(COLUMNS)} FROM knowledge_entries"
SEARCH_FIELDS = ("name", "aliases", "publisher", "short_description", "tags")
# Added after the first schema version; older databases get them on open.
MIGRATED_COLUMNS = (
    ("performance_impact", "TEXT"),
    ("info_url", "TEXT"),
    ("tags", "TEXT"),
)


def like_pattern(value: str) -> str:
    """Wrap ``value`` for a LIKE substring match, escaping LIKE wildcards."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _contains(column: str) -> str:
    # SQLite LIKE is case-insensitive for ASCII.
    return f"{column} LIKE ? ESCAPE '\\'"


class KnowledgeStore:
    """SQLite-backed store of knowledge entries."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = Lock()
        conn: Optional[sqlite3.Connection] = None
        try:
            if str(path) != MEMORY_STORE:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = conn = sqlite3.connect(str(path), check_same_thread=False)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            if conn is not None:
                conn.close()
            raise StoreUnavailable(f"cannot open knowledge store {path}: {exc}") from exc

    def __enter__(self) -> "KnowledgeStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_schema(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS knowledge_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                aliases TEXT,
                publisher TEXT,
                executable_names TEXT,
                category TEXT NOT NULL,
                safety_level TEXT NOT NULL,
                short_description TEXT NOT NULL,
                full_description TEXT,
                disable_impact TEXT,
                recommendation TEXT,
                last_updated TEXT NOT NULL
            )
            """
        )
        for column, column_type in MIGRATED_COLUMNS:
            try:
                self._conn.execute(f"ALTER TABLE knowledge_entries ADD COLUMN {column} {column_type}")
            except sqlite3.OperationalError:
                pass
        self._conn.execute("CREATE INDEX IF NOT EXISTS idx_knowledge_name ON knowledge_entries(name)")
        self._conn.execute("CREATE INDEX IF NOT EXISTS idx_knowledge_publisher ON knowledge_entries(publisher)")
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_knowledge_executables ON knowledge_entries(executable_names)"
        )
        self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # Resolver lookups. Ties go to the lowest id.

    def find_by_executable(self, pattern: str) -> Optional[KnowledgeEntry]:
        return self._first(_contains("executable_names"), (like_pattern(pattern),))

    def find_by_exact_name(self, name: str) -> Optional[KnowledgeEntry]:
        return self._first("name = ? COLLATE NOCASE", (name,))

    def find_by_alias(self, pattern: str) -> Optional[KnowledgeEntry]:
        return self._first(_contains("aliases"), (like_pattern(pattern),))

    def find_by_name_or_alias(self, pattern: str) -> Optional[KnowledgeEntry]:
        like = like_pattern(pattern)
        return self._first(f"{_contains('name')} OR {_contains('aliases')}", (like, like))

    def find_by_publisher(self, pattern: str) -> Optional[KnowledgeEntry]:
        return self._first(_contains("publisher"), (like_pattern(pattern),))

    def search(self, pattern: str, limit: int) -> List[KnowledgeEntry]:
        if limit <= 0:
            return []
        like = like_pattern(pattern)
        where = " OR ".join(_contains(field) for field in SEARCH_FIELDS)
        rows = self._query(
            f"{SELECT_ENTRY} WHERE {where} ORDER BY name COLLATE NOCASE, id LIMIT ?",
            (*([like] * len(SEARCH_FIELDS)), int(limit)),
        )
        return [self._row_to_entry(row) for row in rows]

    # Upsert and listing.

    def get_entry(self, entry_id: int) -> Optional[KnowledgeEntry]:
        return self._first("id = ?", (int(entry_id),))

    def get_by_category(self, category: KnowledgeCategory | str) -> List[KnowledgeEntry]:
        value = KnowledgeCategory(category).value
        rows = self._query(
            f"{SELECT_ENTRY} WHERE category = ? ORDER BY name COLLATE NOCASE, id",
            (value,),
        )
        return [self._row_to_entry(row) for row in rows]

    def count(self) -> int:
        rows = self._query("SELECT COUNT(*) FROM knowledge_entries", ())
        return int(rows[0][0]) if rows else 0

    def save_entry(self, entry: KnowledgeEntry) -> int:
        """Insert ``entry`` when it has no id yet, update it otherwise; returns the id."""
        self._save_many([entry], replace=False)
        return entry.id

    def save_entries(self, entries: Iterable[KnowledgeEntry]) -> int:
        """Save all ``entries`` in one transaction; nothing is written if any row fails."""
        return self._save_many(entries, replace=False)

    def replace_all(self, entries: Iterable[KnowledgeEntry]) -> int:
        """Swap the whole table for ``entries`` in one transaction."""
        return self._save_many(entries, replace=True)

    def clear(self) -> None:
        self._write("DELETE FROM knowledge_entries", ())

    def _save_many(self, entries: Iterable[KnowledgeEntry], *, replace: bool) -> int:
        batch = list(entries)
        for entry in batch:
            entry.validate()
        stamp = datetime.now(timezone.utc)
        try:
            with self._lock, self._conn:
                if replace:
                    self._conn.execute("DELETE FROM knowledge_entries")
                ids = [self._store_row(entry, stamp) for entry in batch]
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"knowledge store update failed: {exc}") from exc
        # Callers' entries only change once the transaction has committed.
        for entry, entry_id in zip(batch, ids):
            entry.id = entry_id
            entry.last_updated = stamp
        return len(batch)

    def _store_row(self, entry: KnowledgeEntry, stamp: datetime) -> int:
        # Runs inside the caller's transaction with the lock held.
        values = (
            entry.name.strip(),
            entry.aliases,
            entry.publisher,
            entry.executable_names,
            entry.category.value,
            entry.safety_level.value,
            entry.short_description.strip(),
            entry.full_description,
            entry.disable_impact,
            entry.performance_impact,
            entry.recommendation,
            entry.info_url,
            entry.tags,
            stamp.isoformat(),
        )
        if entry.is_new:
            cursor = self._conn.execute(
                """
                INSERT INTO knowledge_entries(
                    name, aliases, publisher, executable_names, category, safety_level,
                    short_description, full_description, disable_impact, performance_impact,
                    recommendation, info_url, tags, last_updated
                )
                VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                values,
            )
            logger.debug("Inserted knowledge entry %d (%s)", cursor.lastrowid, entry.name)
            return int(cursor.lastrowid)
        cursor = self._conn.execute(
            """
            UPDATE knowledge_entries SET
                name=?, aliases=?, publisher=?, executable_names=?, category=?, safety_level=?,
                short_description=?, full_description=?, disable_impact=?, performance_impact=?,
                recommendation=?, info_url=?, tags=?, last_updated=?
            WHERE id = ?
            """,
            (*values, entry.id),
        )
        if cursor.rowcount == 0:
            raise InvalidEntry(f"knowledge entry {entry.id} does not exist")
        logger.debug("Updated knowledge entry %d (%s)", entry.id, entry.name)
        return entry.id

    def _first(self, where: str, params: Sequence[Any]) -> Optional[KnowledgeEntry]:
        rows = self._query(f"{SELECT_ENTRY} WHERE {where} ORDER BY id LIMIT 1", params)
        if not rows:
            return None
        return self._row_to_entry(rows[0])

    def _query(self, sql: str, params: Sequence[Any]) -> list[tuple]:
        try:
            with self._lock:
                cursor = self._conn.execute(sql, tuple(params))
                return cursor.fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"knowledge store query failed: {exc}") from exc

    def _write(self, sql: str, params: Sequence[Any]) -> int:
        try:
            with self._lock:
                cursor = self._conn.execute(sql, tuple(params))
                self._conn.commit()
                return int(cursor.lastrowid or 0)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"knowledge store update failed: {exc}") from exc

    @staticmethod
    def _row_to_entry(row: Sequence[Any]) -> KnowledgeEntry:
        data = dict(zip(COLUMNS, row))
        updated = data.pop("last_updated")
        return KnowledgeEntry(
            id=int(data.pop("id")),
            category=KnowledgeCategory(data.pop("category")),
            safety_level=SafetyLevel(data.pop("safety_level")),
            last_updated=datetime.fromisoformat(updated) if updated else datetime.now(timezone.utc),
            **data,
        )
