"""
GitHub OAuth provider.

GitHub user ids are integers and are stringified. The profile `email` is only
the user's public address and is often null; in that case the primary
verified address from /user/emails is used (needs the user:email scope).
"""

from typing import Any, Dict

import httpx

from api_auth.oauth2 import OAuth2Provider
from api_auth.protocol import Identity


class GitHubOAuthProvider(OAuth2Provider):
    """OAuth provider for GitHub accounts."""

    name: str = "github"
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    userinfo_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"

    async def _primary_email(self, client: httpx.AsyncClient, access_token: str) -> str:
        emails = await self._get_json(client, self.emails_url, access_token)
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email") or ""
        return ""

    async def _identity_from_profile(
        self, client: httpx.AsyncClient, profile: Dict[str, Any], access_token: str
    ) -> Identity:
        unique_id = profile.get("id")
        email = profile.get("email") or await self._primary_email(client, access_token)
        return Identity(unique_id="" if unique_id is None else str(unique_id), email=email)
