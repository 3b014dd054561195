"""
Paging and sorting parameters for list queries.

The sort key is the only caller-supplied value that shapes the query text, so
it is checked against an explicit safelist and then resolved to a column by
lookup (see ``catalog.db.repositories.games``).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from catalog.db import schemas
from catalog.db.errors import ValidationError
from catalog.db.validation import Validator, permitted_value

DEFAULT_PAGE_SIZE = 20
MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100

GAME_SORT_SAFELIST: Tuple[str, ...] = (
    "id", "title", "year", "runtime",
    "-id", "-title", "-year", "-runtime",
)


@dataclass(frozen=True)
class Filters:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort: str = "id"
    sort_safelist: Tuple[str, ...] = field(default=GAME_SORT_SAFELIST)

    def sort_column(self) -> str:
        """Return the column name for ``sort`` with any ``-`` prefix removed.

        Raises ``ValidationError`` if ``sort`` is not in the safelist.
        """
        if self.sort not in self.sort_safelist:
            raise ValidationError({"sort": "invalid sort value"})
        return self.sort.lstrip("-")

    def sort_descending(self) -> bool:
        return self.sort.startswith("-")

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def validate_filters(v: Validator, f: Filters) -> None:
    v.check(f.page > 0, "page", "must be greater than zero")
    v.check(f.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(f.page_size > 0, "page_size", "must be greater than zero")
    v.check(f.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
    v.check(permitted_value(f.sort, f.sort_safelist), "sort", "invalid sort value")


def calculate_metadata(total_records: int, page: int, page_size: int) -> schemas.PaginationMetadata:
    # No records means no pages, not "page 1 of 1".
    if total_records == 0:
        return schemas.PaginationMetadata()
    return schemas.PaginationMetadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
