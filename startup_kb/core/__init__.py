"""
Core domain layer for startup-kb.

This package contains the matching logic with no storage dependencies.
Lookups go through the RecordStore protocol so everything here can be
tested against an in-memory fake.
"""

from __future__ import annotations

from .search import KeywordSearch

__all__ = ["KeywordSearch"]
