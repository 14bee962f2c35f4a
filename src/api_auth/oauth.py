"""
OAuth orchestration: redirect URL, code exchange and identity lookup.

Each function resolves the provider first, so an unknown provider fails
before any network call. Email and unique id are fetched by separate calls
so a failure can be attributed to the step that produced it.
"""

from typing import Optional

from api_auth.registry import ProviderRegistry


def get_authorize_redirect(registry: ProviderRegistry, provider: Optional[str]) -> str:
    return registry.resolve(provider).authorize_redirect_url()


async def get_oauth_token(registry: ProviderRegistry, code: str, provider: Optional[str]) -> str:
    return await registry.resolve(provider).exchange_code(code)


async def get_email(registry: ProviderRegistry, token: str, provider: Optional[str]) -> str:
    identity = await registry.resolve(provider).fetch_identity(token)
    return identity.email


async def get_unique_id(registry: ProviderRegistry, token: str, provider: Optional[str]) -> str:
    identity = await registry.resolve(provider).fetch_identity(token)
    return identity.unique_id
