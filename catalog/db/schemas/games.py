from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer


def _parse_runtime(value):
    """Accept runtime as minutes (int) or the rendered ``"<n> mins"`` form."""
    if isinstance(value, bool):
        raise ValueError("invalid runtime format")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        parts = value.split(" ")
        if len(parts) != 2 or parts[1] != "mins":
            raise ValueError("invalid runtime format")
        try:
            return int(parts[0])
        except ValueError:
            raise ValueError("invalid runtime format") from None
    raise ValueError("invalid runtime format")


Runtime = Annotated[
    int,
    BeforeValidator(_parse_runtime),
    PlainSerializer(lambda minutes: f"{minutes} mins", return_type=str, when_used="json"),
]


class GameBase(BaseModel):
    title: str = ""
    year: int = 0
    runtime: Runtime = 0
    genres: Optional[List[str]] = None
    description: List[str] = Field(default_factory=list)
    size: float = 0.0
    price: float = 0.0


class GameCreate(GameBase):
    model_config = ConfigDict(extra='forbid')


class GameUpdate(BaseModel):
    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[Runtime] = None
    genres: Optional[List[str]] = None
    description: Optional[List[str]] = None
    size: Optional[float] = None
    price: Optional[float] = None
    model_config = ConfigDict(extra='forbid')


class Game(GameBase):
    """In-memory catalog record.

    ``id``, ``created_at`` and ``version`` are unset until the record has been
    inserted; the repository fills them in.
    """
    id: Optional[int] = None
    created_at: Optional[datetime] = Field(default=None, exclude=True)
    version: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class PaginationMetadata(BaseModel):
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0


class GameEnvelope(BaseModel):
    game: Game


class GameListEnvelope(BaseModel):
    games: List[Game]
    metadata: PaginationMetadata
