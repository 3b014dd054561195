"""Domain-level exceptions raised by the catalog repository.

Each failure raises a fresh instance so callers can inspect the context
(identifier, field errors, underlying driver error) without relying on shared
sentinel objects.
"""
from __future__ import annotations

from typing import Dict, Optional


class CatalogError(Exception):
    """Base class for repository errors."""


class NotFound(CatalogError):
    """No record matches the identifier, or the identifier is not positive."""

    def __init__(self, record_id: Optional[int] = None):
        self.record_id = record_id
        super().__init__("record not found" if record_id is None else f"record {record_id} not found")


class EditConflict(CatalogError):
    """A conditional update matched zero rows.

    Raised both when the record was modified since ``expected_version`` was
    read and when it was deleted in the meantime.
    """

    def __init__(self, record_id: Optional[int] = None, expected_version: Optional[int] = None):
        self.record_id = record_id
        self.expected_version = expected_version
        super().__init__(
            f"edit conflict on record {record_id} (expected version {expected_version})"
        )


class ValidationError(CatalogError):
    """Input failed the domain rule set; ``errors`` maps field to message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"validation failed ({detail})")


class StorageError(CatalogError):
    """Any other backend failure: connectivity, constraint violation, timeout."""


__all__ = [
    "CatalogError",
    "NotFound",
    "EditConflict",
    "ValidationError",
    "StorageError",
]
