"""
Request orchestration for the four public operations.

Every operation is a straight pipeline: the first failing step raises
AuthError and nothing after it runs. Nothing here catches AuthError; the
HTTP boundary in api_auth.errors renders it.
"""

from typing import Optional

from api_auth import oauth
from api_auth.errors import AuthError, ErrorKind
from api_auth.logging import get_logger
from api_auth.models import OauthCode, UserRoles
from api_auth.protocol import Identity
from api_auth.registry import ProviderRegistry
from api_auth.roles import RoleGateway
from api_auth.tokens import TokenIssuer
from api_auth.user_info import NoopUserInfoUpdater, UserInfoUpdater

logger = get_logger(__name__)


class AuthService:
    """Sequences provider, role store and token issuer calls per request."""

    def __init__(
        self,
        registry: ProviderRegistry,
        roles: RoleGateway,
        tokens: TokenIssuer,
        user_info: Optional[UserInfoUpdater] = None,
    ):
        self.registry = registry
        self.roles = roles
        self.tokens = tokens
        self.user_info = user_info or NoopUserInfoUpdater()

    def authorize(self, provider: Optional[str]) -> str:
        """Return the consent-screen URL of the given provider."""
        return oauth.get_authorize_redirect(self.registry, provider)

    async def login(self, code: str, provider: Optional[str]) -> str:
        """
        Exchange an OAuth code for a signed token.

        code -> provider access token -> email -> unique id -> roles (created
        with the defaults on first login) -> signed token.
        """
        oauth_token = await oauth.get_oauth_token(self.registry, code, provider)
        email = await oauth.get_email(self.registry, oauth_token, provider)
        user_id = await oauth.get_unique_id(self.registry, oauth_token, provider)
        logger.debug("identity_resolved", provider=provider, user_id=user_id)

        roles = await self.roles.get_user_roles(user_id, create_if_missing=True)
        signed_token = self.tokens.make_token(user_id, email, roles)

        await self.user_info.update(Identity(unique_id=user_id, email=email), roles)
        logger.info("login_succeeded", provider=provider, user_id=user_id, roles=roles)
        return signed_token

    async def login_request(self, body: bytes, provider: Optional[str]) -> str:
        """Login from a raw request body, decoded only once the provider is known."""
        self.registry.resolve(provider)
        return await self.login(OauthCode.from_body(body).code, provider)

    async def get_roles(self, user_id: Optional[str]) -> UserRoles:
        if not user_id:
            raise AuthError(ErrorKind.MISSING_REQUIRED_FIELD, "Must provide id parameter")
        roles = await self.roles.get_user_roles(user_id, create_if_missing=False)
        return UserRoles(id=user_id, roles=roles)

    async def set_roles(self, user_roles: UserRoles) -> UserRoles:
        """Replace a user's roles and return the roles as stored afterwards."""
        if not user_roles.id:
            raise AuthError(ErrorKind.MISSING_REQUIRED_FIELD, "Must provide id parameter")
        await self.roles.set_user_roles(user_roles.id, user_roles.roles)
        roles = await self.roles.get_user_roles(user_roles.id, create_if_missing=False)
        return UserRoles(id=user_roles.id, roles=roles)
