"""
Provider registry: provider name -> OAuthProvider instance.

Built once at startup and only read afterwards.
"""

from typing import Dict, List, Optional

import httpx

from api_auth.config import Settings
from api_auth.errors import AuthError, ErrorKind
from api_auth.github import GitHubOAuthProvider
from api_auth.google import GoogleOAuthProvider
from api_auth.protocol import OAuthProvider

PROVIDER_CLASSES = {
    "google": GoogleOAuthProvider,
    "github": GitHubOAuthProvider,
}


class ProviderRegistry:
    """Registry of configured OAuth providers."""

    def __init__(self) -> None:
        self._providers: Dict[str, OAuthProvider] = {}

    def register(self, provider: OAuthProvider) -> None:
        self._providers[provider.name] = provider

    def resolve(self, name: Optional[str]) -> OAuthProvider:
        """Return the provider registered under name, or raise UnknownProvider."""
        if not name:
            raise AuthError(ErrorKind.UNKNOWN_PROVIDER, "Must provide provider parameter")
        provider = self._providers.get(name)
        if provider is None:
            raise AuthError(ErrorKind.UNKNOWN_PROVIDER, f"Invalid provider: {name}")
        return provider

    def names(self) -> List[str]:
        return list(self._providers.keys())


def build_registry(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> ProviderRegistry:
    """Register every provider that has credentials configured."""
    registry = ProviderRegistry()
    for name, provider_settings in settings.providers.items():
        provider_class = PROVIDER_CLASSES.get(name)
        if provider_class is not None:
            registry.register(provider_class(provider_settings, transport=transport))
    return registry
