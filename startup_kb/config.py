from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

MEMORY_STORE = ":memory:"
BUNDLED_SEED_PATH = Path(__file__).parent / "data" / "seed.yaml"


class StoreSettings(BaseModel):
    path: Path = Path("./data/knowledge.sqlite3")
    seed_path: Optional[Path] = None
    seed_on_start: bool = True

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        if str(value) == MEMORY_STORE:
            return Path(MEMORY_STORE)
        return Path(value).expanduser().resolve()

    @field_validator("seed_path", mode="before")
    @classmethod
    def _expand_seed(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser().resolve()

    @property
    def in_memory(self) -> bool:
        return str(self.path) == MEMORY_STORE

    def resolved_seed_path(self) -> Path:
        return self.seed_path or BUNDLED_SEED_PATH


class ResolverSettings(BaseModel):
    min_executable_length: int = 5
    min_base_name_length: int = 4
    ignored_publishers: List[str] = Field(default_factory=lambda: ["N/A"])
    generic_publisher_markers: List[str] = Field(default_factory=lambda: ["Microsoft Windows"])
    match_browser_extensions: bool = True


class Settings(BaseModel):
    store: StoreSettings = StoreSettings()
    resolver: ResolverSettings = ResolverSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml - pass --config explicitly.")
