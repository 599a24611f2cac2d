"""Auth guard tests: the allow-list and rejection before any repository access."""

from pathlib import Path

import pytest
from fastapi import Request
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.auth import PUBLIC_ACTIONS, extract_session_token
from app.db import session as db_session
from app.db.base import Base
from app.main import app
from app.models import Asset, AuditLog
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
        create_user(db, username="guard", password="secret123", full_name="Gate Keeper")
    return testing_session_local


def _make_request(headers: dict[str, str]) -> Request:
    raw_headers = [(key.lower().encode(), value.encode()) for key, value in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers, "query_string": b""})


def test_public_actions_are_exactly_login_logout_check_auth() -> None:
    assert PUBLIC_ACTIONS == {"login", "logout", "check_auth"}


def test_bearer_header_wins_over_cookie() -> None:
    request = _make_request({"Authorization": "Bearer header-token", "Cookie": "session_token=cookie-token"})
    assert extract_session_token(request) == "header-token"


def test_cookie_used_when_no_bearer_header() -> None:
    request = _make_request({"Cookie": "session_token=cookie-token"})
    assert extract_session_token(request) == "cookie-token"


def test_no_token_present() -> None:
    assert extract_session_token(_make_request({"Authorization": "Basic abc"})) is None


@pytest.mark.parametrize(
    ("method", "action"),
    [
        ("GET", "audit_log"),
        ("GET", "audit_detail"),
        ("GET", "asset_history"),
        ("GET", "asset"),
        ("GET", "stats"),
        ("GET", ""),
        ("POST", "change_status"),
        ("POST", ""),
        ("PUT", ""),
        ("DELETE", ""),
        ("GET", "no_such_action"),
    ],
)
def test_protected_actions_reject_anonymous_callers(tmp_path: Path, monkeypatch, method: str, action: str) -> None:
    _setup_db(tmp_path, monkeypatch, "test_guard_matrix.db")

    with TestClient(app) as client:
        response = client.request(method, API, params={"action": action, "id": "1"}, json={})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


def test_anonymous_create_never_reaches_repository(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_guard_create.db")

    with TestClient(app) as client:
        response = client.post(
            API,
            json={"category": "Laptop", "brand": "Acme", "serial": "SN-1", "quantity": 1, "location": "HQ"},
        )

    assert response.status_code == 401
    with session_local() as db:
        assert db.scalar(select(func.count(Asset.id))) == 0
        assert db.scalar(select(func.count(AuditLog.id))) == 0


def test_forged_token_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_guard_forged.db")

    with TestClient(app) as client:
        response = client.get(API, params={"action": "stats"}, headers={"Authorization": "Bearer " + "0" * 64})

    assert response.status_code == 401


def test_public_actions_work_without_session(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_guard_public.db")

    with TestClient(app) as client:
        check = client.get(API, params={"action": "check_auth"})
        logout = client.get(API, params={"action": "logout"})

    assert check.status_code == 200
    assert check.json()["authenticated"] is False
    assert logout.status_code == 200
    assert logout.json()["success"] is True


def test_unknown_action_is_rejected_after_authentication(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_guard_unknown.db")

    with TestClient(app) as client:
        client.post(API, params={"action": "login"}, json={"username": "guard", "password": "secret123"})
        response = client.get(API, params={"action": "no_such_action"})

    assert response.status_code == 400
    assert response.json()["success"] is False
