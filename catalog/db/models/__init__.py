"""
SQLAlchemy models for the catalog store.

Exposes `Base` and the ORM classes.
"""

from .base import Base  # re-export

from .games import Game

__all__ = [
    "Base",
    "Game",
]
