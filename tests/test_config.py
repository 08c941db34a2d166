"""Configuration loading: the service must not start half-configured."""

import pytest

from spirit.config import ConfigurationError, get_settings
from spirit.main import create_app

REQUIRED = {
    "ADMIN_TOKEN": "admin",
    "JWT_SECRET": "jwt",
    "OPENAI_API_KEY": "sk-test",
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No .env file and none of the required variables set."""
    monkeypatch.chdir(tmp_path)
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_loads_from_environment(clean_env):
    for name, value in REQUIRED.items():
        clean_env.setenv(name, value)

    settings = get_settings()
    assert settings.admin_token == "admin"
    assert settings.jwt_secret == "jwt"
    assert settings.port == 10000
    assert settings.access_token_expire_days == 30
    assert settings.openai_model == "gpt-5"


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_value_fails(clean_env, missing):
    for name, value in REQUIRED.items():
        if name != missing:
            clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()
    assert missing.lower() in str(exc_info.value)


def test_empty_admin_token_fails(clean_env):
    for name, value in REQUIRED.items():
        clean_env.setenv(name, value)
    clean_env.setenv("ADMIN_TOKEN", "")

    with pytest.raises(ConfigurationError):
        get_settings()


def test_create_app_refuses_to_start_unconfigured(clean_env):
    with pytest.raises(ConfigurationError):
        create_app()
