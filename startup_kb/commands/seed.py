from __future__ import annotations

from ..seed import reseed, seed_if_empty
from ..service import KnowledgeService


def run(service: KnowledgeService, *, force: bool = False) -> int:
    seed_path = service.settings.store.resolved_seed_path()
    if force:
        inserted = reseed(service.store, seed_path)
    else:
        inserted = seed_if_empty(service.store, seed_path)
    if inserted:
        print(f"Seeded {inserted} entries from {seed_path}.")
    else:
        print(f"Knowledge store already holds {service.count()} entries; use --force to reseed.")
    return inserted
