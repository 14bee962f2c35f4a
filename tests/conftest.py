"""
Shared fixtures: a scriptable "test" provider, in-memory roles and a service.
"""

from typing import Dict, List, Optional

import pytest

from api_auth.errors import AuthError, ErrorKind
from api_auth.protocol import Identity
from api_auth.registry import ProviderRegistry
from api_auth.roles import InMemoryRoleStore, RoleGateway
from api_auth.service import AuthService
from api_auth.tokens import TokenIssuer

SECRET = "test-secret-that-is-at-least-32-bytes-long"


class FakeProvider:
    """Provider that accepts one code and knows one identity per access token."""

    def __init__(self, name: str = "test", codes: Optional[Dict[str, str]] = None,
                 identities: Optional[Dict[str, Identity]] = None):
        self.name = name
        self.codes = codes if codes is not None else {"abc123": "T"}
        self.identities = identities if identities is not None else {"T": Identity("u1", "u@x.com")}
        self.calls: List[str] = []

    def authorize_redirect_url(self) -> str:
        self.calls.append("authorize")
        return f"https://{self.name}.example.com/authorize?client_id=cid"

    async def exchange_code(self, code: str) -> str:
        self.calls.append("exchange")
        if code not in self.codes:
            raise AuthError(ErrorKind.CODE_EXCHANGE_FAILED, f"{self.name}: bad_verification_code")
        return self.codes[code]

    async def fetch_identity(self, access_token: str) -> Identity:
        self.calls.append("identity")
        if access_token not in self.identities:
            raise AuthError(ErrorKind.IDENTITY_FETCH_FAILED, f"{self.name}: profile is missing id or email")
        return self.identities[access_token]


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def registry(provider):
    registry = ProviderRegistry()
    registry.register(provider)
    return registry


@pytest.fixture
def store():
    return InMemoryRoleStore()


@pytest.fixture
def gateway(store):
    return RoleGateway(store, ["user"])


@pytest.fixture
def issuer():
    return TokenIssuer(SECRET, issuer="api-auth-test")


@pytest.fixture
def service(registry, gateway, issuer):
    return AuthService(registry, gateway, issuer)
