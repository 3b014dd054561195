import pytest
from fastapi.testclient import TestClient

from catalog.db.database import SessionLocal, engine
from catalog.db import models, schemas


@pytest.fixture(scope="module")
def db():
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def clean():
    with engine.begin() as conn:
        for table in reversed(models.Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture
def client():
    from catalog.api.main import app
    return TestClient(app)


@pytest.fixture
def make_game():
    def _make(**overrides):
        fields = {
            "title": "Half-Life",
            "year": 1998,
            "runtime": 720,
            "genres": ["shooter", "sci-fi"],
            "description": ["Gordon Freeman arrives at Black Mesa."],
            "size": 0.4,
            "price": 9.99,
        }
        fields.update(overrides)
        return schemas.Game(**fields)
    return _make
