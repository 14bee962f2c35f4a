"""
Tests for environment-driven settings and service wiring.
"""

import pytest

from api_auth.config import load_settings
from api_auth.logging import drop_secrets
from api_auth.roles import InMemoryRoleStore, RedisRoleStore, build_role_store
from api_auth.router import build_service

ENV_VARS = [
    "JWT_SECRET", "JWT_ALGORITHM", "TOKEN_EXPIRY_SECONDS", "TOKEN_ISSUER", "DEFAULT_ROLES",
    "ROLE_STORE_URL", "ROLE_KEY_PREFIX", "LOG_LEVEL", "LOG_JSON",
    "GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REDIRECT_URI", "GOOGLE_SCOPES",
    "GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET", "GITHUB_REDIRECT_URI", "GITHUB_SCOPES",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.jwt_secret == ""
    assert settings.jwt_algorithm == "HS256"
    assert settings.token_expiry_seconds == 7 * 24 * 3600
    assert settings.default_roles == ["user"]
    assert settings.role_store_url == ""
    assert settings.providers == {}
    assert settings.log_json is False


def test_provider_requires_id_and_secret(clean_env):
    clean_env.setenv("GOOGLE_CLIENT_ID", "gid")
    clean_env.setenv("GITHUB_CLIENT_ID", "hid")
    clean_env.setenv("GITHUB_CLIENT_SECRET", "hsecret")
    clean_env.setenv("GITHUB_REDIRECT_URI", "https://app.example.com/cb")

    settings = load_settings()

    assert list(settings.providers) == ["github"]
    github = settings.providers["github"]
    assert github.redirect_uri == "https://app.example.com/cb"
    assert github.scopes == ["read:user", "user:email"]


def test_overrides(clean_env):
    clean_env.setenv("DEFAULT_ROLES", "user, applicant ,")
    clean_env.setenv("TOKEN_EXPIRY_SECONDS", "3600")
    clean_env.setenv("LOG_JSON", "true")

    settings = load_settings()

    assert settings.default_roles == ["user", "applicant"]
    assert settings.token_expiry_seconds == 3600
    assert settings.log_json is True


def test_build_service_from_env(clean_env):
    clean_env.setenv("JWT_SECRET", "x" * 40)
    clean_env.setenv("GOOGLE_CLIENT_ID", "gid")
    clean_env.setenv("GOOGLE_CLIENT_SECRET", "gsecret")

    service = build_service(load_settings())

    assert service.registry.names() == ["google"]
    assert isinstance(service.roles.store, InMemoryRoleStore)
    assert service.roles.default_roles == ["user"]


def test_redis_url_selects_redis_store():
    store = build_role_store("redis://localhost:6379/0", key_prefix="auth:roles:")

    assert isinstance(store, RedisRoleStore)
    assert store._key("u1") == "auth:roles:u1"


def test_drop_secrets():
    event = drop_secrets(None, "info", {"event": "x", "token": "abc", "user_id": "u1"})
    assert event == {"event": "x", "token": "***", "user_id": "u1"}
