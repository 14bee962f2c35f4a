"""
FastAPI auth router: authorize redirect, code login, role lookup and update.

Handlers only decode the request, call AuthService and encode the result.
Failures propagate as AuthError to the handlers from install_error_handlers().
"""

from typing import Optional

from fastapi import APIRouter, Body, Request
from fastapi.responses import RedirectResponse

from api_auth.config import Settings
from api_auth.models import Token, UserRoles
from api_auth.registry import build_registry
from api_auth.roles import RoleGateway, build_role_store
from api_auth.service import AuthService
from api_auth.tokens import TokenIssuer


def build_service(settings: Settings) -> AuthService:
    """Wire registry, role gateway and token issuer from settings."""
    return AuthService(
        registry=build_registry(settings),
        roles=RoleGateway(
            build_role_store(settings.role_store_url, settings.role_key_prefix),
            settings.default_roles,
        ),
        tokens=TokenIssuer(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiry_seconds=settings.token_expiry_seconds,
            issuer=settings.token_issuer,
        ),
    )


def create_auth_router(service: AuthService) -> APIRouter:
    """Create an APIRouter with /, /code/ and /roles/ endpoints."""
    router = APIRouter()

    @router.get("/")
    async def authorize(provider: Optional[str] = None):
        """Redirect the client to the provider's consent screen."""
        return RedirectResponse(url=service.authorize(provider), status_code=302)

    @router.post("/code/", response_model=Token)
    async def login(request: Request, provider: Optional[str] = None):
        """Exchange an OAuth code for a signed token carrying the user's roles."""
        return Token(token=await service.login_request(await request.body(), provider))

    @router.get("/roles/", response_model=UserRoles)
    async def get_roles(id: Optional[str] = None):
        return await service.get_roles(id)

    @router.put("/roles/", response_model=UserRoles)
    async def set_roles(user_roles: Optional[UserRoles] = Body(default=None)):
        """Replace the roles of an existing user and return the stored result."""
        return await service.set_roles(user_roles or UserRoles())

    return router
