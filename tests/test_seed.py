from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bakery.core.config import settings
from bakery.db import session as db_session
from bakery.db.base import Base
from bakery.db.seed import ensure_delivery_settings_seed
from bakery.main import app
from bakery.models import DeliverySchedule


def _session_factory(db_file: Path) -> sessionmaker:
    engine = create_engine(f"sqlite:///{db_file}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def test_seed_creates_default_schedules_once(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "seed_delivery_settings", True)
    monkeypatch.setattr(settings, "default_fulfillment_days", [4, 6])
    monkeypatch.setattr(settings, "default_cutoff_day", 2)
    session = _session_factory(tmp_path / "seed.db")()
    try:
        assert ensure_delivery_settings_seed(session) == 2
        assert ensure_delivery_settings_seed(session) == 0

        schedules = session.query(DeliverySchedule).order_by(DeliverySchedule.day_of_week).all()
        assert [(item.name, item.cutoff_day) for item in schedules] == [
            ("Thursday delivery", 2),
            ("Saturday delivery", 2),
        ]
    finally:
        session.close()


def test_seed_disabled_leaves_tables_empty(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "seed_delivery_settings", False)
    session = _session_factory(tmp_path / "no_seed.db")()
    try:
        assert ensure_delivery_settings_seed(session) == 0
        assert session.query(DeliverySchedule).count() == 0
    finally:
        session.close()


def test_startup_survives_seed_failure(tmp_path: Path, monkeypatch) -> None:
    factory = _session_factory(tmp_path / "startup.db")
    monkeypatch.setattr(db_session, "engine", factory.kw["bind"])
    monkeypatch.setattr(db_session, "SessionLocal", factory)

    def _fail(session):
        raise RuntimeError("seed exploded")

    monkeypatch.setattr("bakery.main.ensure_delivery_settings_seed", _fail)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
