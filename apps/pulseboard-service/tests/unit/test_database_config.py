import pytest

from pulseboard.db import database


def _clear(monkeypatch):
    for var in ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB"):
        monkeypatch.delenv(var, raising=False)


def test_database_url_prefers_explicit_url(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/pulse")
    assert database._get_database_url() == "postgresql://u:p@db:5432/pulse"


def test_database_url_from_components(monkeypatch):
    _clear(monkeypatch)
    for var, value in {
        "POSTGRES_USER": "u",
        "POSTGRES_PASSWORD": "p",
        "POSTGRES_HOST": "db",
        "POSTGRES_PORT": "5432",
        "POSTGRES_DB": "pulse",
    }.items():
        monkeypatch.setenv(var, value)
    assert database._get_database_url() == "postgresql://u:p@db:5432/pulse"


def test_partial_components_raise(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("POSTGRES_USER", "u")
    with pytest.raises(ValueError, match="POSTGRES_PASSWORD"):
        database._get_database_url()


def test_local_sqlite_when_unconfigured(monkeypatch):
    _clear(monkeypatch)
    assert database._get_database_url() == database.LOCAL_SQLITE_URL


def test_pytest_runtime_uses_in_memory_sqlite():
    assert database._is_pytest_runtime()
    assert database.engine.dialect.name == "sqlite"
