"""Shared fixtures for the people-network test suite."""
import os

# Set env vars BEFORE any app imports
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from people_network import crud
from people_network.db import get_db, install_sqlite_pragmas
from people_network.models import Base


# ── Database fixtures ──

@pytest.fixture
def engine():
    """Fresh in-memory SQLite per test, foreign keys on."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    install_sqlite_pragmas(eng)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ── Person fixtures ──

@pytest.fixture
def pramod(db):
    return crud.create_person(db, "Pramod", group_tag="family", email="pramod@example.com")


@pytest.fixture
def amit(db):
    return crud.create_person(db, "Amit", group_tag="friend")


@pytest.fixture
def ravi(db):
    return crud.create_person(db, "Ravi", group_tag="colleague")


@pytest.fixture
def small_network(db, pramod, amit, ravi):
    """pramod -Brother-> amit, pramod -Friend-> ravi, ravi -Mentor-> pramod."""
    rels = [
        crud.create_relationship(db, pramod.id, amit.id, "Brother"),
        crud.create_relationship(db, pramod.id, ravi.id, "Friend"),
        crud.create_relationship(db, ravi.id, pramod.id, "Mentor"),
    ]
    return {"pramod": pramod, "amit": amit, "ravi": ravi, "rels": rels}


# ── FastAPI app fixtures ──

@pytest.fixture
def app_with_db(session_factory):
    """FastAPI app with dependency override pointing at the test engine."""
    from people_network.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_with_db):
    with TestClient(app_with_db) as tc:
        yield tc


@pytest.fixture
def make_person(client):
    """Factory: POST a person and return the JSON body."""
    def _factory(name, **fields):
        resp = client.post("/people", json={"name": name, **fields})
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _factory
