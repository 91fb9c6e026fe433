from __future__ import annotations


class KnowledgeError(Exception):
    """Base class for knowledge base errors."""


class InvalidQuery(KnowledgeError, ValueError):
    """Raised when a lookup is attempted without any usable identifier."""


class InvalidEntry(KnowledgeError, ValueError):
    """Raised when an entry is missing its name or short description."""


class StoreUnavailable(KnowledgeError):
    """The backing store could not be opened or queried."""


class SeedDataError(KnowledgeError):
    """The reference dataset file is missing or malformed."""
