"""
Google OAuth provider.

OpenID Connect endpoints; the stable user id is the `sub` claim of the
userinfo response (older v2 userinfo responses carry it as `id`).
"""

from typing import Any, Dict

import httpx

from api_auth.oauth2 import OAuth2Provider
from api_auth.protocol import Identity


class GoogleOAuthProvider(OAuth2Provider):
    """OAuth provider for Google accounts."""

    name: str = "google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"

    async def _identity_from_profile(
        self, client: httpx.AsyncClient, profile: Dict[str, Any], access_token: str
    ) -> Identity:
        unique_id = profile.get("sub") or profile.get("id") or ""
        return Identity(unique_id=str(unique_id), email=profile.get("email") or "")
