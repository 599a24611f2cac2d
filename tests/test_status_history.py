"""Condition-status changes and the dual ledger they write."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.errors import NotFound, StorageFailure, ValidationError
from app.db import session as db_session
from app.db.base import Base
from app.main import app
from app.models import Asset, AssetStatusHistory, AuditLog, User
from app.schemas.asset import AssetCreate
from app.services import asset_service, status_history
from app.services.user_service import create_user

API = "/api/v1"


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / name)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    with testing_session_local() as db:
        create_user(db, username="tech", password="secret123", full_name="Field Tech")
    return testing_session_local


def _login(client: TestClient) -> None:
    response = client.post(API, params={"action": "login"}, json={"username": "tech", "password": "secret123"})
    assert response.status_code == 200


def _create_asset(client: TestClient, serial: str) -> int:
    response = client.post(
        API,
        json={"category": "Laptop", "brand": "Acme", "serial": serial, "quantity": 1, "location": "HQ"},
    )
    assert response.status_code == 200
    return response.json()["id"]


def _ledger_counts(session_local: sessionmaker) -> tuple[int, int]:
    with session_local() as db:
        return (
            db.scalar(select(func.count(AuditLog.id))),
            db.scalar(select(func.count(AssetStatusHistory.id))),
        )


def test_create_then_change_status_scenario(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_status_scenario.db")

    with TestClient(app) as client:
        _login(client)
        asset_id = _create_asset(client, "X1")

        initial_history = client.get(API, params={"action": "asset_history", "id": asset_id}).json()
        change = client.post(
            API,
            params={"action": "change_status"},
            json={"asset_id": asset_id, "new_status": "Damaged", "reason": "dropped"},
        )
        history = client.get(API, params={"action": "asset_history", "id": asset_id}).json()
        audit_log = client.get(API, params={"action": "audit_log"}).json()
        asset = client.get(API, params={"action": "asset", "id": asset_id}).json()

    assert len(initial_history) == 1
    assert initial_history[0]["old_status"] is None
    assert initial_history[0]["new_status"] == "Good"
    assert initial_history[0]["change_reason"] == "Initial creation"

    assert change.json() == {"success": True}
    assert asset["condition_status"] == "Damaged"

    assert len(history) == 2
    assert history[0]["old_status"] == "Good"
    assert history[0]["new_status"] == "Damaged"
    assert history[0]["change_reason"] == "dropped"
    assert history[0]["changed_by_name"] == "Field Tech"
    assert history[1]["old_status"] is None

    assert [entry["action"] for entry in audit_log] == ["UPDATE_STATUS", "CREATE"]
    status_entry = audit_log[0]
    assert status_entry["record_id"] == asset_id
    assert status_entry["table_name"] == "assets"
    assert status_entry["old_values"] == {"condition_status": "Good"}
    assert status_entry["new_values"] == {"condition_status": "Damaged"}
    assert status_entry["user_name"] == "Field Tech"


def test_each_change_records_prior_status(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_status_chain.db")

    with TestClient(app) as client:
        _login(client)
        asset_id = _create_asset(client, "CHAIN-1")
        for new_status, reason in [("Lost", "missing after audit"), ("Good", "found in storage"), ("Decommissioned", "end of life")]:
            response = client.post(
                API,
                params={"action": "change_status"},
                json={"asset_id": asset_id, "new_status": new_status, "reason": reason},
            )
            assert response.status_code == 200
        history = client.get(API, params={"action": "asset_history", "id": asset_id}).json()

    transitions = [(entry["old_status"], entry["new_status"]) for entry in history]
    assert transitions == [
        ("Good", "Decommissioned"),
        ("Lost", "Good"),
        ("Good", "Lost"),
        (None, "Good"),
    ]


@pytest.mark.parametrize(
    ("new_status", "reason"),
    [
        ("", "some reason"),
        ("Damaged", ""),
        ("Damaged", "   "),
        ("Stolen", "not a known status"),
    ],
)
def test_invalid_status_change_leaves_everything_unchanged(
    tmp_path: Path, monkeypatch, new_status: str, reason: str
) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_status_invalid.db")

    with TestClient(app) as client:
        _login(client)
        asset_id = _create_asset(client, "INV-1")
        before = _ledger_counts(session_local)
        response = client.post(
            API,
            params={"action": "change_status"},
            json={"asset_id": asset_id, "new_status": new_status, "reason": reason},
        )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert _ledger_counts(session_local) == before
    with session_local() as db:
        assert db.get(Asset, asset_id).condition_status == "Good"


def test_change_status_requires_all_fields(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_status_missing.db")

    with TestClient(app) as client:
        _login(client)
        response = client.post(API, params={"action": "change_status"}, json={"asset_id": 1})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Asset ID, new status, and reason required")


def test_change_status_of_missing_asset_is_not_found(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_status_missing_asset.db")

    with TestClient(app) as client:
        _login(client)
        response = client.post(
            API,
            params={"action": "change_status"},
            json={"asset_id": 999, "new_status": "Lost", "reason": "gone"},
        )

    assert response.status_code == 404
    assert _ledger_counts(session_local) == (0, 0)


def test_history_write_failure_rolls_back_status_and_audit(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_status_atomic.db")

    with session_local() as db:
        user_id = db.scalar(select(User.id).where(User.username == "tech"))
        asset = asset_service.create_asset(
            db,
            AssetCreate(category="Monitor", brand="Acme", serial="ATOM-1", quantity=1, location="Lab"),
            user_id=user_id,
        )
        asset_id = asset.id

    before = _ledger_counts(session_local)

    def _failing_record_transition(*args, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(status_history, "record_transition", _failing_record_transition)

    with session_local() as db:
        with pytest.raises(StorageFailure):
            status_history.change_status(db, asset_id=asset_id, new_status="Lost", user_id=user_id, reason="missing")

    assert _ledger_counts(session_local) == before
    with session_local() as db:
        assert db.get(Asset, asset_id).condition_status == "Good"


def test_service_level_validation_errors() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    session_local = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    with session_local() as db:
        user = create_user(db, username="svc", password="pw")
        with pytest.raises(ValidationError):
            status_history.change_status(db, asset_id=1, new_status="", user_id=user.id, reason="x")
        with pytest.raises(ValidationError):
            status_history.change_status(db, asset_id=1, new_status="Lost", user_id=user.id, reason="")
        with pytest.raises(NotFound):
            status_history.change_status(db, asset_id=1, new_status="Lost", user_id=user.id, reason="gone")
        with pytest.raises(ValidationError):
            status_history.record_transition(
                db, asset_id=1, old_status="Good", new_status="Lost", user_id=user.id, reason=""
            )


def test_transition_table_is_total_over_known_states() -> None:
    for current in status_history.CONDITION_STATUSES:
        for new in status_history.CONDITION_STATUSES:
            assert status_history.can_transition(current, new)
    assert status_history.can_transition("Bueno", "Damaged")
    assert not status_history.can_transition("Good", "Stolen")
