"""
Name normalization for startup entry identification.

Startup entries rarely carry a clean product name. Scheduled tasks append
GUIDs and build numbers, updaters append "Task"/"Machine"/"Core", and Electron
apps register under their bundle identifier. The helpers here reduce those
strings to something that can be looked up against the knowledge base.

All functions are pure and have no I/O dependencies.
"""

from __future__ import annotations

import re
from pathlib import PureWindowsPath
from typing import Optional

GUID_PATTERN = re.compile(
    r"\{[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\}",
    re.IGNORECASE,
)
VERSION_PATTERN = re.compile(r"(?<!\d)\d+\.\d+\.\d+\.\d+")
GENERIC_SUFFIXES = ("task", "machine", "core", "system", "logon", "service")
BUNDLE_PREFIXES = ("electron.app.", "com.todesktop.")
TRIM_CHARS = " .-_"

CHROMIUM_EXTENSION_ID = re.compile(r"^[a-p]{32}$")
EXTENSIONS_SEGMENT = "extensions"


def _is_separator(char: str) -> bool:
    return char in TRIM_CHARS or char.isspace()


def _strip_generic_suffixes(value: str) -> str:
    # Walks back over the whole trailing run of suffix words in one pass.
    end = len(value)
    while True:
        stop = end
        while stop and _is_separator(value[stop - 1]):
            stop -= 1
        for word in GENERIC_SUFFIXES:
            if stop >= len(word) and value[stop - len(word):stop].lower() == word:
                end = stop - len(word)
                break
        else:
            return value[:end]


def _strip_bundle_prefixes(value: str) -> str:
    start = 0
    while True:
        while start < len(value) and _is_separator(value[start]):
            start += 1
        for prefix in BUNDLE_PREFIXES:
            if value[start:start + len(prefix)].lower() == prefix:
                start += len(prefix)
                break
        else:
            return value[start:]


def _strip_once(value: str) -> str:
    result = GUID_PATTERN.sub("", value)
    result = VERSION_PATTERN.sub("", result)
    result = _strip_generic_suffixes(result)
    result = _strip_bundle_prefixes(result)
    return result.strip(TRIM_CHARS)


def extract_base_name(value: str) -> str:
    """
    Reduce a startup entry display name to its base product name.

    Process:
    1. Remove braced GUIDs
    2. Remove four-part version numbers
    3. Remove the trailing run of Task/Machine/Core/System/Logon/Service words
    4. Remove the "electron.app." bundle prefix
    5. Remove the "com.todesktop." bundle prefix
    6. Trim spaces, dots, dashes and underscores

    The sequence is repeated until nothing changes, so the result never
    contains a pattern the function would strip.

    Examples:
        "BraveSoftwareUpdate{3B1A6C4F-0A2E-4B9E-8C2D-1A2B3C4D5E6F}" → "BraveSoftwareUpdate"
        "GoogleUpdaterTask144.0.7547.0{...GUID...}" → "GoogleUpdater"
        "electron.app.Notion" → "Notion"

    Returns:
        The base name, or "" when nothing usable remains
    """
    if not value:
        return ""
    current = value
    while True:
        cleaned = _strip_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def executable_file_name(executable: Optional[str]) -> str:
    """Lowercased file name of an executable path (Windows or POSIX separators)."""
    if not executable:
        return ""
    cleaned = executable.strip().strip('"').strip()
    if not cleaned:
        return ""
    return PureWindowsPath(cleaned).name.lower()


def extract_extension_id(path: Optional[str]) -> Optional[str]:
    """
    Pull a browser extension id out of a profile path.

    The id is the first folder after "Extensions", e.g.
    "...\\Extensions\\cjpalhdlnbpafiamejdnhcphjbkeiagm\\1.51.0_0". Chromium ids
    are 32 letters in a-p; Firefox uses "{guid}" or "name@domain".
    """
    if not path:
        return None
    parts = [part for part in re.split(r"[\\/]+", path.strip()) if part]
    for index, part in enumerate(parts):
        if part.lower() != EXTENSIONS_SEGMENT or index + 1 >= len(parts):
            continue
        candidate = parts[index + 1]
        if CHROMIUM_EXTENSION_ID.match(candidate):
            return candidate
        if candidate.startswith("{") and candidate.endswith("}"):
            return candidate
        if "@" in candidate:
            return candidate
        return None
    return None
