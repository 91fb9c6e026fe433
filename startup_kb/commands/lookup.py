from __future__ import annotations

import json
from typing import Optional

from ..models import KnowledgeCategory
from ..service import KnowledgeService
from .output import entries_json, entry_lines, summary_line


def run_find(
    service: KnowledgeService,
    *,
    name: Optional[str] = None,
    executable: Optional[str] = None,
    publisher: Optional[str] = None,
    json_output: bool = False,
) -> bool:
    resolution = service.resolve(name, executable, publisher)
    if json_output:
        payload = {
            "strategy": resolution.strategy,
            "entry": resolution.entry.to_record() if resolution.entry else None,
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
        return resolution.found
    if not resolution.entry:
        print("No match.")
        return False
    print(f"Matched by {resolution.strategy}:")
    for line in entry_lines(resolution.entry):
        print(line)
    return True


def run_search(
    service: KnowledgeService,
    keyword: str,
    *,
    limit: int = 20,
    json_output: bool = False,
) -> int:
    results = service.search(keyword, limit)
    if json_output:
        print(entries_json(results))
        return len(results)
    if not results:
        print("No entries found.")
        return 0
    for entry in results:
        print(summary_line(entry))
    return len(results)


def run_category(service: KnowledgeService, category: str, *, json_output: bool = False) -> int:
    results = service.get_by_category(KnowledgeCategory(category))
    if json_output:
        print(entries_json(results))
        return len(results)
    if not results:
        print(f"No entries in category {category}.")
        return 0
    for entry in results:
        print(summary_line(entry))
    return len(results)
