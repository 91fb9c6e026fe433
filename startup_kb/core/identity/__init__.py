"""
Identity resolution for startup entries.

This module handles:
- Name normalization (GUIDs, versions, generic suffixes, bundle prefixes)
- Executable file name and browser extension id extraction
- The ordered resolution cascade against a record store
"""

from __future__ import annotations

from .normalize import executable_file_name, extract_base_name, extract_extension_id
from .resolver import KnowledgeResolver, RecordStore

__all__ = [
    "KnowledgeResolver",
    "RecordStore",
    "executable_file_name",
    "extract_base_name",
    "extract_extension_id",
]
