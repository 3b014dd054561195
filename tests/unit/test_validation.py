from datetime import datetime, UTC

import pytest

from catalog.db import schemas
from catalog.db.errors import ValidationError
from catalog.db.validation import Validator, permitted_value, unique, validate_game


def _errors(**fields):
    base = {"title": "Doom", "year": 1993, "runtime": 300, "genres": ["shooter"]}
    base.update(fields)
    v = Validator()
    validate_game(v, schemas.Game(**base))
    return v.errors


def test_valid_game_has_no_errors():
    assert _errors() == {}


def test_title_rules():
    assert _errors(title="")["title"] == "must be provided"
    assert _errors(title="x" * 501)["title"] == "must not be more than 500 bytes long"
    # The limit counts bytes, not characters
    assert _errors(title="é" * 251)["title"] == "must not be more than 500 bytes long"
    assert "title" not in _errors(title="x" * 500)


def test_year_rules():
    assert _errors(year=0)["year"] == "must be provided"
    assert _errors(year=1887)["year"] == "must be greater than 1888"
    assert "year" not in _errors(year=1888)
    assert _errors(year=datetime.now(UTC).year + 1)["year"] == "must not be in the future"


def test_runtime_rules():
    assert _errors(runtime=0)["runtime"] == "must be provided"
    assert _errors(runtime=-5)["runtime"] == "must be a positive integer"


def test_genre_rules():
    assert _errors(genres=None)["genres"] == "must be provided"
    assert _errors(genres=[])["genres"] == "must contain at least 1 genre"
    assert _errors(genres=list("abcdef"))["genres"] == "must not contain more than 5 genres"
    assert _errors(genres=["rpg", "rpg"])["genres"] == "must not contain duplicate values"
    assert "genres" not in _errors(genres=list("abcde"))


def test_size_and_price_must_not_be_negative():
    errors = _errors(size=-1.0, price=-0.01)
    assert errors["size"] == "must not be negative"
    assert errors["price"] == "must not be negative"


def test_first_error_per_field_wins():
    v = Validator()
    v.check(False, "title", "first")
    v.check(False, "title", "second")
    assert v.errors == {"title": "first"}
    assert not v.valid


def test_raise_if_invalid_carries_errors():
    v = Validator()
    v.raise_if_invalid()
    v.add_error("year", "must be provided")
    with pytest.raises(ValidationError) as exc_info:
        v.raise_if_invalid()
    assert exc_info.value.errors == {"year": "must be provided"}


def test_helpers():
    assert permitted_value("id", ["id", "-id"])
    assert not permitted_value("name", ["id", "-id"])
    assert unique(["a", "b"])
    assert not unique(["a", "a"])


def test_size_and_price_must_be_provided():
    game = schemas.Game(title="Doom", year=1993, runtime=300, genres=["shooter"])
    game.size = None
    game.price = None
    v = Validator()
    validate_game(v, game)
    assert v.errors == {"size": "must be provided", "price": "must be provided"}
