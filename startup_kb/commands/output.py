from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models import KnowledgeEntry


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def warning(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "WARNING", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ERROR", detail).render()


ENTRY_FIELDS = (
    ("Publisher", "publisher"),
    ("Aliases", "aliases"),
    ("Executables", "executable_names"),
    ("Description", "full_description"),
    ("If disabled", "disable_impact"),
    ("Performance", "performance_impact"),
    ("Recommendation", "recommendation"),
    ("More info", "info_url"),
    ("Tags", "tags"),
)


def entry_lines(entry: KnowledgeEntry) -> list[str]:
    lines = [
        f"[{entry.id}] {entry.name} ({entry.category.value}, {entry.safety_level.value})",
        f"  {entry.short_description}",
    ]
    for label, attr in ENTRY_FIELDS:
        value = getattr(entry, attr)
        if value:
            lines.append(f"  {label}: {value}")
    return lines


def summary_line(entry: KnowledgeEntry) -> str:
    return f"[{entry.id}] {entry.name} - {entry.safety_level.value} - {entry.short_description}"


def entries_json(entries: Iterable[KnowledgeEntry]) -> str:
    return json.dumps([entry.to_record() for entry in entries], indent=2, sort_keys=True)
