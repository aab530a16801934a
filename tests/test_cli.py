"""Tests for the create-user command in main.py."""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from auth.store import UserStore
from core.config import get_settings
from main import main


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("SECRET_KEY", "cli-test-secret-0123456789abcdef0123")
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def _lookup(db_url: str, email: str):
    store = UserStore(db_url)
    try:
        return store.get_by_email(email)
    finally:
        store.close()


def test_create_admin(db_url, capsys):
    argv = ["create-user", "--name", "Root", "--email", "root@x.com", "--role", "admin", "--password", "pw"]
    assert main(argv) == 0
    assert "Created user" in capsys.readouterr().out
    assert _lookup(db_url, "root@x.com").role == "admin"


def test_role_defaults_to_member(db_url):
    assert main(["create-user", "--name", "Ann", "--email", "a@x.com", "--password", "pw"]) == 0
    assert _lookup(db_url, "a@x.com").role == "member"


def test_duplicate_email_fails(db_url, capsys):
    argv = ["create-user", "--name", "Ann", "--email", "a@x.com", "--password", "pw"]
    assert main(argv) == 0
    assert main(argv) == 1
    assert "already exists" in capsys.readouterr().out


def test_blank_details_are_rejected(db_url, capsys):
    assert main(["create-user", "--name", "", "--email", "   ", "--password", "pw"]) == 1
    out = capsys.readouterr().out
    assert "Invalid user details" in out
    assert "name" in out and "email" in out
    store = UserStore(db_url)
    try:
        assert store.has_users() is False
    finally:
        store.close()


def test_malformed_email_is_rejected(db_url):
    assert main(["create-user", "--name", "Ann", "--email", "not-an-email", "--password", "pw"]) == 1


def test_cli_user_logs_in_over_http(db_url):
    argv = ["create-user", "--name", " Root ", "--email", " Root@x.com ", "--role", "admin", "--password", " pw "]
    assert main(argv) == 0
    assert _lookup(db_url, "root@x.com").name == "Root"

    with TestClient(create_app(get_settings())) as client:
        resp = client.post("/api/auth/login", json={"email": "root@x.com", "password": " pw "})
    assert resp.status_code == 200, resp.text
    assert resp.json()["meta"]["name"] == "Root"
