"""
Auth API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.products import router as products_router
from auth.gateway import AuthGateway
from auth.jwt import TokenCodec
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from config.settings import Settings, config

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Raises ``ConfigurationError`` when the signing secret is missing, so a
    misconfigured process fails at startup instead of on the first request.
    """
    settings = settings or config

    codec = TokenCodec(
        secret=settings.jwt_secret,
        ttl=timedelta(hours=settings.jwt_expiry_hours),
    )
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    app = FastAPI(
        title="Auth API",
        version="1.0.0",
        description="User signup/signin with bearer-token sessions.",
    )
    app.state.settings = settings
    app.state.token_codec = codec
    app.state.password_hasher = hasher
    app.state.auth_gateway = AuthGateway(codec)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(products_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    logger.info(
        "Application configured (token ttl=%dh, bcrypt rounds=%d)",
        settings.jwt_expiry_hours, settings.bcrypt_rounds,
    )
    return app


if __name__ == "__main__":
    uvicorn.run(
        create_app(),
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )
