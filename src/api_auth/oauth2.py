"""
Shared OAuth2 authorization-code provider.

Builds the consent URL with Authlib, exchanges codes through Authlib's httpx
client and calls the user-info endpoint with a plain httpx client. Subclasses set the endpoint
URLs and implement _identity_from_profile() for their profile format.
"""

from typing import Any, Dict, List, Optional

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.common.security import generate_token
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from api_auth.config import ProviderSettings
from api_auth.errors import AuthError, ErrorKind
from api_auth.logging import get_logger
from api_auth.protocol import Identity, OAuthProvider

logger = get_logger(__name__)


class OAuth2Provider(OAuthProvider):
    """Authorization-code flow against a provider's authorize/token/userinfo endpoints."""

    name: str = ""
    authorize_url: str = ""
    token_url: str = ""
    userinfo_url: str = ""
    timeout: float = 20

    def __init__(self, settings: ProviderSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = settings.client_id
        self.client_secret = settings.client_secret
        self.redirect_uri = settings.redirect_uri
        self.scopes: List[str] = list(settings.scopes)
        self.transport = transport

    def _oauth_client(self) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.scopes),
            redirect_uri=self.redirect_uri,
            timeout=self.timeout,
            transport=self.transport,
        )

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def authorize_redirect_url(self) -> str:
        """Consent-screen URL. The state parameter is not tracked server-side."""
        return prepare_grant_uri(
            self.authorize_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_uri,
            scope=" ".join(self.scopes),
            state=generate_token(30),
        )

    async def exchange_code(self, code: str) -> str:
        if not code:
            raise AuthError(ErrorKind.CODE_EXCHANGE_FAILED, "Missing oauth code")
        try:
            async with self._oauth_client() as client:
                token = await client.fetch_token(self.token_url, code=code)
        except (AuthlibBaseError, httpx.HTTPError, ValueError) as e:
            logger.info("code_exchange_failed", provider=self.name, error=str(e))
            raise AuthError(ErrorKind.CODE_EXCHANGE_FAILED, f"{self.name}: {e}") from e

        access_token = token.get("access_token")
        if not access_token:
            raise AuthError(ErrorKind.CODE_EXCHANGE_FAILED, f"{self.name}: token response had no access_token")
        return access_token

    async def _get_json(self, client: httpx.AsyncClient, url: str, access_token: str) -> Any:
        r = await client.get(
            url,
            headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
        )
        r.raise_for_status()
        return r.json()

    async def fetch_identity(self, access_token: str) -> Identity:
        try:
            async with self._http_client() as client:
                profile = await self._get_json(client, self.userinfo_url, access_token)
                identity = await self._identity_from_profile(client, profile, access_token)
        except (httpx.HTTPError, ValueError) as e:
            logger.info("identity_fetch_failed", provider=self.name, error=str(e))
            raise AuthError(ErrorKind.IDENTITY_FETCH_FAILED, f"{self.name}: {e}") from e

        if not identity.unique_id or not identity.email:
            raise AuthError(
                ErrorKind.IDENTITY_FETCH_FAILED,
                f"{self.name}: profile is missing id or email",
            )
        return identity

    async def _identity_from_profile(
        self, client: httpx.AsyncClient, profile: Dict[str, Any], access_token: str
    ) -> Identity:
        raise NotImplementedError
