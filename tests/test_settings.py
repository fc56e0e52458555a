import pytest

from todolist.settings import DEFAULT_DATABASE_URL, get_settings

ENV_VARS = [
    "DATABASE_URL",
    "DB_POOL_SIZE",
    "DB_POOL_TIMEOUT",
    "HTTP_HOST",
    "HTTP_PORT",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.pool_size == 5
    assert settings.pool_timeout == 5.0
    assert settings.http_host == "127.0.0.1"
    assert settings.http_port == 8000
    assert settings.cors_allow_origins == ["*"]
    assert settings.log_level == "INFO"


def test_argument_locator_used_when_env_unset():
    assert get_settings("sqlite:///tasks.db").database_url == "sqlite:///tasks.db"


def test_env_locator_wins_over_argument(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "/var/lib/todo.db")
    assert get_settings("sqlite:///tasks.db").database_url == "/var/lib/todo.db"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "0.5")
    monkeypatch.setenv("HTTP_PORT", "9001")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.pool_size == 3
    assert settings.pool_timeout == 0.5
    assert settings.http_port == 9001
    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "0")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "soon")
    monkeypatch.setenv("HTTP_PORT", "eighty")
    settings = get_settings()
    assert settings.pool_size == 5
    assert settings.pool_timeout == 5.0
    assert settings.http_port == 8000
