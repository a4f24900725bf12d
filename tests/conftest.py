from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from bakery.core.config import settings
from bakery.db import session as db_session
from bakery.db.base import Base
from bakery.main import app


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture()
def testing_session_local(tmp_path: Path, monkeypatch) -> Iterator[sessionmaker]:
    engine = _build_test_engine(tmp_path / "test_api.db")
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", session_factory)
    monkeypatch.setattr(settings, "seed_delivery_settings", False)
    yield session_factory
    engine.dispose()


@pytest.fixture()
def client(testing_session_local) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
