import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog.db import models


# Session-wide Postgres: TEST_DATABASE_URL if given, else a throwaway container
@pytest.fixture(scope="session")
def _test_postgres():
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        yield url
        return
    try:
        from testcontainers.postgres import PostgresContainer
    except ImportError:
        pytest.skip("testcontainers is not installed and TEST_DATABASE_URL is not set")
    image = os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine")
    try:
        # Creating the container already talks to the docker daemon
        pg = PostgresContainer(image)
        pg.start()
    except Exception as exc:
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    try:
        url = pg.get_connection_url()
        # Normalize driver to psycopg2 default used by app (remove +psycopg2 if present)
        if "+" in url.split("://", 1)[0]:
            url = "postgresql://" + url.split("://", 1)[1]
        yield url
    finally:
        pg.stop()


@pytest.fixture(scope="session")
def _engine(_test_postgres):
    engine = create_engine(_test_postgres)
    models.Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        models.Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="session")
def _SessionLocal(_engine):
    return sessionmaker(bind=_engine, autoflush=False, autocommit=False)


@pytest.fixture
def pg_db(_engine, _SessionLocal):
    session = _SessionLocal()
    try:
        yield session
    finally:
        session.close()
        with _engine.begin() as conn:
            conn.execute(models.Game.__table__.delete())
