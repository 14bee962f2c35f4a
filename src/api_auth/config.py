"""
Runtime configuration for the auth service.

Everything is read from the environment (main.py loads .env first). Provider
credentials are optional: a provider is only registered when both its client
id and secret are set. JWT_SECRET has no default; without it login fails with
a signing error rather than issuing tokens under a guessable key.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ProviderSettings:
    """Client credentials and callback for one OAuth provider."""

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Settings:
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_expiry_seconds: int = 7 * 24 * 3600
    token_issuer: str = "api-auth"
    default_roles: List[str] = field(default_factory=lambda: ["user"])
    role_store_url: str = ""
    role_key_prefix: str = "roles:"
    providers: Dict[str, ProviderSettings] = field(default_factory=dict)
    log_level: str = "info"
    log_json: bool = False


def _split_csv(value: str) -> List[str]:
    """Split a comma separated env value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _provider_from_env(prefix: str, default_scopes: str) -> Optional[ProviderSettings]:
    """Build provider settings from PREFIX_CLIENT_ID etc. None if not configured."""
    client_id = os.getenv(f"{prefix}_CLIENT_ID", "")
    client_secret = os.getenv(f"{prefix}_CLIENT_SECRET", "")
    if not client_id or not client_secret:
        return None
    return ProviderSettings(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=os.getenv(f"{prefix}_REDIRECT_URI", ""),
        scopes=_split_csv(os.getenv(f"{prefix}_SCOPES", default_scopes)),
    )


def load_settings() -> Settings:
    """Read Settings from the current environment."""
    providers = {}
    google = _provider_from_env("GOOGLE", "openid,email,profile")
    if google:
        providers["google"] = google
    github = _provider_from_env("GITHUB", "read:user,user:email")
    if github:
        providers["github"] = github

    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_expiry_seconds=int(os.getenv("TOKEN_EXPIRY_SECONDS", str(7 * 24 * 3600))),
        token_issuer=os.getenv("TOKEN_ISSUER", "api-auth"),
        default_roles=_split_csv(os.getenv("DEFAULT_ROLES", "user")),
        role_store_url=os.getenv("ROLE_STORE_URL", ""),
        role_key_prefix=os.getenv("ROLE_KEY_PREFIX", "roles:"),
        providers=providers,
        log_level=os.getenv("LOG_LEVEL", "info"),
        log_json=os.getenv("LOG_JSON", "0").lower() in ("1", "true", "yes"),
    )
