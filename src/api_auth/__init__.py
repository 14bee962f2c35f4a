"""
OAuth login and role management service.

Exposes the request orchestrator (AuthService), its collaborators (provider
registry, role gateway, token issuer), the error boundary and settings.
"""

from .config import Settings, load_settings
from .errors import AuthError, ErrorKind, install_error_handlers
from .logging import configure_logging, get_logger
from .protocol import Identity, OAuthProvider
from .registry import ProviderRegistry, build_registry
from .roles import InMemoryRoleStore, RedisRoleStore, RoleGateway
from .service import AuthService
from .tokens import TokenIssuer

__all__ = [
    "AuthError",
    "AuthService",
    "ErrorKind",
    "Identity",
    "InMemoryRoleStore",
    "OAuthProvider",
    "ProviderRegistry",
    "RedisRoleStore",
    "RoleGateway",
    "Settings",
    "TokenIssuer",
    "build_registry",
    "configure_logging",
    "get_logger",
    "install_error_handlers",
    "load_settings",
]
