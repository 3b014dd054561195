"""
Field-level rule checking for catalog entities.

A `Validator` collects at most one message per field; the first failing check
for a key wins so users see the most basic problem first.
"""
from __future__ import annotations

from datetime import datetime, UTC
from typing import Dict, Iterable

from catalog.db.errors import ValidationError

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5


class Validator:
    def __init__(self) -> None:
        self.errors: Dict[str, str] = {}

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        self.errors.setdefault(key, message)

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(self.errors)


def permitted_value(value, permitted: Iterable) -> bool:
    return value in set(permitted)


def unique(values: Iterable) -> bool:
    values = list(values)
    return len(set(values)) == len(values)


def validate_game(v: Validator, game) -> None:
    """Apply the catalog entity rules to ``game`` (any object with the fields)."""
    title = game.title or ""
    v.check(title != "", "title", "must be provided")
    v.check(len(title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    year = game.year or 0
    v.check(year != 0, "year", "must be provided")
    v.check(year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(year <= datetime.now(UTC).year, "year", "must not be in the future")

    runtime = game.runtime or 0
    v.check(runtime != 0, "runtime", "must be provided")
    v.check(runtime > 0, "runtime", "must be a positive integer")

    v.check(game.genres is not None, "genres", "must be provided")
    genres = game.genres or []
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")

    v.check(game.size is not None, "size", "must be provided")
    v.check((game.size or 0) >= 0, "size", "must not be negative")
    v.check(game.price is not None, "price", "must be provided")
    v.check((game.price or 0) >= 0, "price", "must not be negative")
