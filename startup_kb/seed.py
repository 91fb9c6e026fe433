from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import SeedDataError
from .models import KnowledgeCategory, KnowledgeEntry, SafetyLevel
from .store import KnowledgeStore

logger = logging.getLogger(__name__)


def _join(value: Optional[List[str] | str]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    items = [item.strip() for item in value if item and item.strip()]
    return ", ".join(items) or None


class SeedEntry(BaseModel):
    name: str
    short_description: str
    aliases: Optional[List[str] | str] = None
    publisher: Optional[str] = None
    executable_names: Optional[List[str] | str] = None
    category: KnowledgeCategory = KnowledgeCategory.OTHER
    safety_level: SafetyLevel = SafetyLevel.SAFE
    full_description: Optional[str] = None
    disable_impact: Optional[str] = None
    performance_impact: Optional[str] = None
    recommendation: Optional[str] = None
    info_url: Optional[str] = None
    tags: Optional[List[str] | str] = None

    @field_validator("name", "short_description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def to_entry(self) -> KnowledgeEntry:
        return KnowledgeEntry(
            name=self.name,
            short_description=self.short_description,
            aliases=_join(self.aliases),
            publisher=self.publisher,
            executable_names=_join(self.executable_names),
            category=self.category,
            safety_level=self.safety_level,
            full_description=self.full_description,
            disable_impact=self.disable_impact,
            performance_impact=self.performance_impact,
            recommendation=self.recommendation,
            info_url=self.info_url,
            tags=_join(self.tags),
        )


class SeedFile(BaseModel):
    entries: List[SeedEntry] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "SeedFile":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def load_seed(path: Path) -> list[KnowledgeEntry]:
    try:
        seed = SeedFile.load(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise SeedDataError(f"cannot load seed data {path}: {exc}") from exc
    return [item.to_entry() for item in seed.entries]


def seed_if_empty(store: KnowledgeStore, path: Path) -> int:
    """Load the reference dataset into an empty store; returns rows inserted."""
    existing = store.count()
    if existing:
        logger.debug("Knowledge store already holds %d entries; skipping seed", existing)
        return 0
    inserted = store.save_entries(load_seed(path))
    logger.info("Seeded %d knowledge entries from %s", inserted, path)
    return inserted


def reseed(store: KnowledgeStore, path: Path) -> int:
    inserted = store.replace_all(load_seed(path))
    logger.info("Reseeded %d knowledge entries from %s", inserted, path)
    return inserted
