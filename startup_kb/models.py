from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from .errors import InvalidEntry


class KnowledgeCategory(str, Enum):
    WINDOWS_SYSTEM = "windows_system"
    WINDOWS_SECURITY = "windows_security"
    HARDWARE = "hardware"
    SECURITY = "security"
    GAMING = "gaming"
    PRODUCTIVITY = "productivity"
    COMMUNICATION = "communication"
    CLOUD_STORAGE = "cloud_storage"
    MEDIA = "media"
    BROWSER = "browser"
    UTILITY = "utility"
    BLOATWARE = "bloatware"
    PUP = "pup"
    MALWARE = "malware"
    OTHER = "other"


class SafetyLevel(str, Enum):
    """How safe it is to disable the program at startup."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    SAFE = "safe"
    RECOMMENDED_DISABLE = "recommended_disable"
    SHOULD_REMOVE = "should_remove"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class KnowledgeEntry:
    name: str
    short_description: str
    id: int = 0
    aliases: Optional[str] = None
    publisher: Optional[str] = None
    executable_names: Optional[str] = None
    category: KnowledgeCategory = KnowledgeCategory.OTHER
    safety_level: SafetyLevel = SafetyLevel.SAFE
    full_description: Optional[str] = None
    disable_impact: Optional[str] = None
    performance_impact: Optional[str] = None
    recommendation: Optional[str] = None
    info_url: Optional[str] = None
    tags: Optional[str] = None
    last_updated: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.category, KnowledgeCategory):
            self.category = KnowledgeCategory(self.category)
        if not isinstance(self.safety_level, SafetyLevel):
            self.safety_level = SafetyLevel(self.safety_level)

    @property
    def is_new(self) -> bool:
        return not self.id

    def validate(self) -> None:
        if not (self.name or "").strip():
            raise InvalidEntry("knowledge entry requires a name")
        if not (self.short_description or "").strip():
            raise InvalidEntry(f"knowledge entry {self.name!r} requires a short description")

    def to_record(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "aliases": self.aliases,
            "publisher": self.publisher,
            "executable_names": self.executable_names,
            "category": self.category.value,
            "safety_level": self.safety_level.value,
            "short_description": self.short_description,
            "full_description": self.full_description,
            "disable_impact": self.disable_impact,
            "performance_impact": self.performance_impact,
            "recommendation": self.recommendation,
            "info_url": self.info_url,
            "tags": self.tags,
            "last_updated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class Resolution:
    """
    Outcome of resolving a program description against the knowledge base.

    ``strategy`` names the cascade step that produced ``entry``; both are
    ``None`` when nothing matched.
    """

    entry: Optional[KnowledgeEntry] = None
    strategy: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.entry is not None
