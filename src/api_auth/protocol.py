"""
Protocol for OAuth providers used by the auth service.

Implementations (e.g. GoogleOAuthProvider, GitHubOAuthProvider) build the
consent-screen URL, exchange a one-time code for an access token and resolve
the user's identity from that token. Each call is a single attempt.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Identity:
    """Provider-stable user id plus email, as resolved from an access token."""

    unique_id: str
    email: str


@runtime_checkable
class OAuthProvider(Protocol):
    """Protocol for an OAuth provider (e.g. Google, GitHub)."""

    name: str

    def authorize_redirect_url(self) -> str:
        """Return the provider's consent-screen URL."""
        ...

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for a provider access token."""
        ...

    async def fetch_identity(self, access_token: str) -> Identity:
        """Resolve the user's unique id and email with an access token."""
        ...
