"""
Games API endpoints.

CRUD and filtered listing for catalog records. Each endpoint makes one
repository call and maps repository errors onto HTTP responses.
"""
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from sqlalchemy.orm import Session

from catalog.db import schemas
from catalog.db.database import get_db
from catalog.db.errors import CatalogError, EditConflict, NotFound, StorageError, ValidationError
from catalog.db.filters import DEFAULT_PAGE_SIZE, GAME_SORT_SAFELIST, Filters
from catalog.db.repositories import games as repo_games

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/games", tags=["games"])

NOT_FOUND_MESSAGE = "the requested resource could not be found"
EDIT_CONFLICT_MESSAGE = "unable to update the record due to an edit conflict, please try again"
SERVER_ERROR_MESSAGE = "the server encountered a problem and could not process your request"


def _raise_http(exc: CatalogError) -> NoReturn:
    if isinstance(exc, NotFound):
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE) from exc
    if isinstance(exc, EditConflict):
        raise HTTPException(status_code=409, detail=EDIT_CONFLICT_MESSAGE) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    if isinstance(exc, StorageError):
        logger.error(f"storage failure: {exc}")
    raise HTTPException(status_code=500, detail=SERVER_ERROR_MESSAGE) from exc


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@router.post("", response_model=schemas.GameEnvelope, status_code=status.HTTP_201_CREATED)
def create_game_endpoint(
    game_in: schemas.GameCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    game = schemas.Game(**game_in.model_dump())
    try:
        repo_games.insert_game(db, game)
    except CatalogError as e:
        _raise_http(e)
    # Tell the client where the new resource lives
    response.headers["Location"] = f"/v1/games/{game.id}"
    return {"game": game}


@router.get("", response_model=schemas.GameListEnvelope)
def list_games_endpoint(
    title: str = "",
    genres: str = "",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort: str = "id",
    db: Session = Depends(get_db),
):
    filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=GAME_SORT_SAFELIST)
    try:
        games, metadata = repo_games.get_all_games(db, title, _split_csv(genres), filters)
    except CatalogError as e:
        _raise_http(e)
    return {"games": games, "metadata": metadata}


@router.get("/{game_id}", response_model=schemas.GameEnvelope)
def show_game_endpoint(game_id: int, db: Session = Depends(get_db)):
    try:
        game = repo_games.get_game(db, game_id)
    except CatalogError as e:
        _raise_http(e)
    return {"game": game}


@router.patch("/{game_id}", response_model=schemas.GameEnvelope)
def update_game_endpoint(
    game_id: int,
    game_update: schemas.GameUpdate,
    db: Session = Depends(get_db),
    x_expected_version: Optional[str] = Header(default=None),
):
    try:
        game = repo_games.get_game(db, game_id)
    except CatalogError as e:
        _raise_http(e)

    # Optional precondition: the client states which version it last saw.
    if x_expected_version:
        try:
            expected_version = int(x_expected_version)
        except ValueError:
            raise HTTPException(status_code=400, detail="X-Expected-Version must be an integer")
        if expected_version != game.version:
            raise HTTPException(status_code=409, detail=EDIT_CONFLICT_MESSAGE)

    # Fields sent as null are left as stored.
    for key, value in game_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(game, key, value)

    try:
        repo_games.update_game(db, game)
    except CatalogError as e:
        _raise_http(e)
    return {"game": game}


@router.delete("/{game_id}")
def delete_game_endpoint(game_id: int, db: Session = Depends(get_db)):
    try:
        repo_games.delete_game(db, game_id)
    except CatalogError as e:
        _raise_http(e)
    return {"message": "game successfully deleted"}
