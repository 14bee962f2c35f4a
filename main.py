"""
FastAPI app: multi-provider OAuth login issuing role-bearing JWTs.

Decisions:
- .env is loaded before importing api_auth so JWT_SECRET, provider
  credentials and ROLE_STORE_URL are in the environment when settings are
  read (Ruff E402 suppressed for that).
- Providers are registered only when GOOGLE_* / GITHUB_* credentials exist;
  asking for any other provider fails with UnknownProvider.
- Without ROLE_STORE_URL roles live in process memory (dev only).
"""

import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

# Load .env before api_auth so settings see it; Ruff E402.
from api_auth import AuthService, configure_logging, get_logger, install_error_handlers, load_settings  # noqa: E402
from api_auth.router import build_service, create_auth_router  # noqa: E402

logger = get_logger(__name__)


def create_app(service: Optional[AuthService] = None) -> FastAPI:
    """Build the app around service, or around one wired from the environment."""
    if service is None:
        settings = load_settings()
        configure_logging(settings.log_level, settings.log_json)
        service = build_service(settings)
        logger.info("auth_service_configured", providers=service.registry.names())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        close = getattr(service.roles.store, "close", None)
        if close is not None:
            await close()

    app = FastAPI(lifespan=lifespan)
    install_error_handlers(app)
    app.include_router(create_auth_router(service))
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on HOST:PORT (default 0.0.0.0:8000)."""
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    run()
