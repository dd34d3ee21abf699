import pytest

from app.fazbook.config import load_config, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in (
        "SECRET_KEY",
        "ENV",
        "DATABASE_URL",
        "LOG_LEVEL",
        "USERS_URL_PREFIX",
        "USERS_STRICT_NOT_FOUND",
        "CREATE_TABLES_ON_START",
    ):
        monkeypatch.delenv(k, raising=False)


def test_defaults():
    s = load_settings()
    assert s.database_url == "sqlite:///fazbook.db"
    assert s.users_url_prefix == "/users"
    assert s.users_strict_not_found is True
    assert s.create_tables_on_start is True
    assert s.log_level == "INFO"


@pytest.mark.parametrize("raw,expected", [("0", False), ("false", False), ("no", False), ("1", True), ("ON", True)])
def test_strict_not_found_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("USERS_STRICT_NOT_FOUND", raw)
    assert load_settings().users_strict_not_found is expected


@pytest.mark.parametrize("raw,expected", [("people", "/people"), ("/people/", "/people"), ("/", "/users")])
def test_url_prefix_is_normalized(monkeypatch, raw, expected):
    monkeypatch.setenv("USERS_URL_PREFIX", raw)
    assert load_settings().users_url_prefix == expected


def test_production_defaults(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    cfg = load_config()
    assert cfg["CREATE_TABLES_ON_START"] is False
    assert cfg["SESSION_COOKIE_SECURE"] is True
