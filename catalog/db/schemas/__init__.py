"""
Pydantic schemas for the catalog API and repository entities.
"""

from .games import (
    Runtime,
    GameBase,
    GameCreate,
    GameUpdate,
    Game,
    PaginationMetadata,
    GameEnvelope,
    GameListEnvelope,
)

__all__ = [
    "Runtime",
    "GameBase",
    "GameCreate",
    "GameUpdate",
    "Game",
    "PaginationMetadata",
    "GameEnvelope",
    "GameListEnvelope",
]
