from __future__ import annotations

from dataclasses import dataclass

import yaml

from ..config import Settings
from ..errors import KnowledgeError, StoreUnavailable
from ..models import KnowledgeCategory
from ..seed import SeedFile
from ..store import KnowledgeStore
from .output import error, ok as ok_line, warning


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings) -> DoctorReport:
    checks: list[str] = []
    ok = True

    seed_path = settings.store.resolved_seed_path()
    if not seed_path.exists():
        ok = False
        checks.append(error("Seed data", f"missing {seed_path}"))
    else:
        try:
            seed = SeedFile.load(seed_path)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            ok = False
            checks.append(error("Seed data", f"{seed_path}: {exc}"))
        else:
            checks.append(ok_line("Seed data", f"{len(seed.entries)} entries in {seed_path}"))

    try:
        store = KnowledgeStore(settings.store.path)
    except StoreUnavailable as exc:
        checks.append(error("Knowledge store", str(exc)))
        return DoctorReport(ok=False, checks=checks)

    try:
        count = store.count()
        if count:
            checks.append(ok_line("Knowledge store", f"{count} entries in {settings.store.path}"))
            empty = [
                category.value
                for category in KnowledgeCategory
                if category is not KnowledgeCategory.OTHER and not store.get_by_category(category)
            ]
            if empty:
                checks.append(warning("Categories", f"no entries for {', '.join(empty)}"))
            else:
                checks.append(ok_line("Categories"))
        elif settings.store.seed_on_start:
            checks.append(warning("Knowledge store", "empty (seeded on next start)"))
        else:
            checks.append(warning("Knowledge store", "empty (run `startup-kb seed`)"))
    except KnowledgeError as exc:
        ok = False
        checks.append(error("Knowledge store", str(exc)))
    finally:
        store.close()

    resolver = settings.resolver
    if resolver.min_executable_length < 1 or resolver.min_base_name_length < 1:
        ok = False
        checks.append(error("Resolver", "length thresholds must be positive"))
    else:
        checks.append(
            ok_line(
                "Resolver",
                f"executable>={resolver.min_executable_length}, base name>={resolver.min_base_name_length}",
            )
        )

    return DoctorReport(ok=ok, checks=checks)
