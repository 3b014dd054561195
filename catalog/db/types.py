"""Custom SQLAlchemy types used by the persistence layer."""
from __future__ import annotations

import json
from typing import Iterable, List

from sqlalchemy.dialects import postgresql
from sqlalchemy.types import JSON, Text, TypeDecorator


class TagArray(TypeDecorator[List[str]]):
    """Store an ordered list of strings as a native PostgreSQL ``TEXT[]``.

    Falls back to JSON storage on dialects without array columns (e.g. SQLite
    during unit tests). Containment queries are dialect specific; see
    ``catalog.db.repositories.games``.
    """

    cache_ok = True
    impl = JSON

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.ARRAY(Text))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        if isinstance(value, str) or not isinstance(value, Iterable):
            raise TypeError(
                f"TagArray expects an iterable of strings, got {type(value)!r}"
            )
        return [str(v) for v in value]

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return [str(v) for v in parsed]
            # Postgres array literal format "{a,b}".
            stripped = value.strip("{}")
            if not stripped:
                return []
            return [part.strip('"') for part in stripped.split(",")]
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return value

    def copy(self, **kwargs):  # type: ignore[override]
        return TagArray()
