"""
Game repository functions.

Implements insert/get/update/delete and the filtered, paginated listing for
catalog records. Every function takes the caller's ``Session``, runs a single
statement under the configured statement timeout, and commits or rolls back
its own transaction. Failures surface as ``catalog.db.errors`` exceptions.
"""
from __future__ import annotations

import logging
import os
from typing import List, Sequence, Tuple

from sqlalchemy import delete, func, insert, literal, select, type_coerce, update, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.types import Text

from catalog.db import models, schemas
from catalog.db.errors import EditConflict, NotFound, StorageError
from catalog.db.filters import Filters, calculate_metadata, validate_filters
from catalog.db.validation import Validator, validate_game

logger = logging.getLogger(__name__)

QUERY_TIMEOUT_SECONDS = float(os.getenv("CATALOG_QUERY_TIMEOUT_SECONDS", "3"))

# Largest id a BIGINT primary key can hold.
MAX_ID = 2**63 - 1

# Sort keys resolve to columns here; nothing from the request reaches SQL text.
SORT_COLUMNS = {
    "id": models.Game.id,
    "title": models.Game.title,
    "year": models.Game.year,
    "runtime": models.Game.runtime,
}


def _dialect_name(db: Session) -> str:
    return db.get_bind().dialect.name


def _apply_timeout(db: Session) -> None:
    """Bound the current transaction's statements on PostgreSQL.

    SET does not accept bind parameters; the value is an integer we compute.
    """
    if _dialect_name(db) == "postgresql":
        timeout_ms = int(QUERY_TIMEOUT_SECONDS * 1000)
        db.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))


def _storage_error(db: Session, action: str, exc: Exception) -> StorageError:
    db.rollback()
    logger.error(f"Error during game {action}: {exc}")
    return StorageError(f"failed to {action} game: {exc}")


def _validate(game: schemas.Game) -> None:
    v = Validator()
    validate_game(v, game)
    v.raise_if_invalid()


def _row_values(game: schemas.Game) -> dict:
    return {
        "title": game.title,
        "year": game.year,
        "runtime": game.runtime,
        "genres": list(game.genres or []),
        "description": list(game.description or []),
        "size": game.size,
        "price": game.price,
    }


def insert_game(db: Session, game: schemas.Game) -> schemas.Game:
    """Persist ``game`` and fill in its ``id``, ``created_at`` and ``version``."""
    _validate(game)
    stmt = (
        insert(models.Game)
        .values(**_row_values(game))
        .returning(models.Game.id, models.Game.created_at, models.Game.version)
    )
    try:
        _apply_timeout(db)
        row = db.execute(stmt).one()
        db.commit()
    except SQLAlchemyError as e:
        raise _storage_error(db, "insert", e) from e
    game.id, game.created_at, game.version = row.id, row.created_at, row.version
    logger.info(f"Inserted game {game.id} ('{game.title}')")
    return game


def get_game(db: Session, game_id: int) -> schemas.Game:
    if game_id < 1 or game_id > MAX_ID:
        raise NotFound(game_id)
    stmt = (
        select(models.Game)
        .where(models.Game.id == game_id)
        .execution_options(populate_existing=True)
    )
    game = None
    try:
        _apply_timeout(db)
        db_game = db.execute(stmt).scalar_one_or_none()
        # Convert before commit expires the ORM instance.
        if db_game is not None:
            game = schemas.Game.model_validate(db_game, from_attributes=True)
        db.commit()
    except SQLAlchemyError as e:
        raise _storage_error(db, "get", e) from e
    if game is None:
        raise NotFound(game_id)
    return game


def update_game(db: Session, game: schemas.Game) -> int:
    """Write ``game`` only if the stored version still equals ``game.version``.

    On success the stored version is incremented, assigned back to
    ``game.version`` and returned. A missing row and a stale version both
    raise ``EditConflict``.
    """
    _validate(game)
    stmt = (
        update(models.Game)
        .where(models.Game.id == game.id, models.Game.version == game.version)
        .values(**_row_values(game), version=models.Game.version + 1)
        .returning(models.Game.version)
        .execution_options(synchronize_session=False)
    )
    try:
        _apply_timeout(db)
        new_version = db.execute(stmt).scalar_one_or_none()
        if new_version is None:
            db.rollback()
        else:
            db.commit()
    except SQLAlchemyError as e:
        raise _storage_error(db, "update", e) from e
    if new_version is None:
        logger.warning(f"Edit conflict updating game {game.id} at version {game.version}")
        raise EditConflict(game.id, game.version)
    game.version = new_version
    logger.info(f"Updated game {game.id} to version {new_version}")
    return new_version


def delete_game(db: Session, game_id: int) -> None:
    if game_id < 1 or game_id > MAX_ID:
        raise NotFound(game_id)
    stmt = (
        delete(models.Game)
        .where(models.Game.id == game_id)
        .execution_options(synchronize_session=False)
    )
    try:
        _apply_timeout(db)
        result = db.execute(stmt)
        rows_affected = result.rowcount
        db.commit()
    except SQLAlchemyError as e:
        raise _storage_error(db, "delete", e) from e
    if rows_affected == 0:
        raise NotFound(game_id)
    logger.info(f"Deleted game {game_id}")


def _title_clauses(dialect: str, title: str) -> list:
    if dialect == "postgresql":
        return [
            func.to_tsvector('simple', models.Game.title).op('@@')(
                func.plainto_tsquery('simple', title)
            )
        ]
    # Without a text-search engine every query token must appear in the title.
    lowered = func.lower(models.Game.title)
    return [lowered.contains(token.lower(), autoescape=True) for token in title.split()]


def _genre_clauses(dialect: str, genres: Sequence[str]) -> list:
    if dialect == "postgresql":
        return [type_coerce(models.Game.genres, postgresql.ARRAY(Text)).contains(list(genres))]
    clauses = []
    for genre in genres:
        elements = func.json_each(models.Game.genres).table_valued("value")
        clauses.append(
            select(literal(1)).select_from(elements).where(elements.c.value == genre).exists()
        )
    return clauses


def get_all_games(
    db: Session,
    title: str,
    genres: Sequence[str],
    filters: Filters,
) -> Tuple[List[schemas.Game], schemas.PaginationMetadata]:
    """Return one page of games plus pagination metadata.

    An empty ``title`` or ``genres`` matches every record. The filters are
    validated before any statement is built or executed. The total comes from
    a window count in the same statement, so a page past the end reports no
    records at all.
    """
    v = Validator()
    validate_filters(v, filters)
    v.raise_if_invalid()

    sort_column = SORT_COLUMNS[filters.sort_column()]
    order = sort_column.desc() if filters.sort_descending() else sort_column.asc()

    dialect = _dialect_name(db)
    stmt = select(func.count().over().label("total_records"), models.Game)
    if title:
        stmt = stmt.where(*_title_clauses(dialect, title))
    if genres:
        stmt = stmt.where(*_genre_clauses(dialect, genres))
    stmt = (
        stmt.order_by(order, models.Game.id.asc())
        .limit(filters.limit())
        .offset(filters.offset())
        .execution_options(populate_existing=True)
    )

    total_records = 0
    games: List[schemas.Game] = []
    try:
        _apply_timeout(db)
        for row in db.execute(stmt).all():
            total_records = row.total_records
            games.append(schemas.Game.model_validate(row.Game, from_attributes=True))
        db.commit()
    except SQLAlchemyError as e:
        raise _storage_error(db, "list", e) from e

    metadata = calculate_metadata(total_records, filters.page, filters.page_size)
    return games, metadata
