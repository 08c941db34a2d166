"""
Spirit Gateway - Main Application Entry Point

Usage:
    uvicorn spirit.main:create_app --factory --host 0.0.0.0 --port 10000
    spirit-gateway
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from spirit import __version__
from spirit.api import chat_router, health_router, invites_router, reflections_router
from spirit.config import Settings, get_settings
from spirit.db import build_engine, build_session_maker, init_db
from spirit.errors import validation_exception_handler
from spirit.logging_config import RequestLoggingMiddleware, setup_logging
from spirit.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from spirit.services import (
    AdminGuard,
    ChatService,
    InviteLedger,
    ReflectionStore,
    TokenIssuer,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown"""
    settings: Settings = app.state.settings
    logger.info(f"{settings.app_name} starting up (v{__version__})")
    await init_db(app.state.engine)
    logger.info("Database initialized")

    yield

    await app.state.engine.dispose()
    logger.info(f"{settings.app_name} shut down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the gateway with its services wired from `settings`.

    Raises:
        ConfigurationError: if settings are loaded from the environment and a
            required value is missing.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        description="Invite-gated gateway for the Spirit chat persona.",
        version=__version__,
        lifespan=lifespan,
    )

    # Services live for the lifetime of the app; routes reach them via app.state
    engine = build_engine(settings.database_url, debug=settings.debug)
    app.state.settings = settings
    app.state.engine = engine
    app.state.ledger = InviteLedger()
    app.state.admin_guard = AdminGuard(settings.admin_token)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.access_token_expire_days,
    )
    app.state.chat_service = ChatService(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_retries=settings.openai_max_retries,
    )
    app.state.reflection_store = ReflectionStore(
        build_session_maker(engine),
        default_limit=settings.reflections_default_limit,
        max_limit=settings.reflections_max_limit,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Middleware: last added runs first (logging → rate limit → CORS → routes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        limiter=SlidingWindowLimiter(settings.rate_limit_per_minute),
        trust_forwarded_for=settings.trust_forwarded_for,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router)
    app.include_router(invites_router)
    app.include_router(chat_router)
    app.include_router(reflections_router)

    return app


def run() -> None:
    """Console entry point: serve the gateway with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "spirit.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
