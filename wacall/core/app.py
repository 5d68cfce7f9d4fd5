"""
FastAPI application factory.

Wires the signature verifier, handshake, parser and dispatcher around the
caller's call manager and broadcaster and mounts the webhook routes.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wacall.api.controllers import WebhookController
from wacall.api.middleware import ErrorHandlerMiddleware
from wacall.api.routes import create_webhook_router, health_router
from wacall.broadcast import LoggingBroadcaster, create_broadcaster
from wacall.core.config.settings import Settings, settings as default_settings
from wacall.core.events import EventDispatcher, LoggingCallManager
from wacall.core.logging.logger import get_app_logger, setup_app_logging
from wacall.domain.interfaces import IBroadcaster, ICallManager
from wacall.webhooks import EventParser, SignatureVerifier, SubscriptionHandshake


def create_app(
    call_manager: ICallManager,
    broadcaster: IBroadcaster | None = None,
    *,
    verify_token: str | None = None,
    app_secret: str | bytes | None = None,
    settings: Settings | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the webhook application.

    Args:
        call_manager: External call-state manager
        broadcaster: Real-time broadcaster (defaults to logging only)
        verify_token: Handshake token, defaults to WEBHOOK_VERIFY_TOKEN
        app_secret: HMAC key, defaults to APP_SECRET
        settings: Settings instance (defaults to the global one)
        configure_logging: Install the Rich logging handlers on startup

    Returns:
        Configured FastAPI application

    Raises:
        ValueError: If a secret is neither passed nor configured
    """
    settings = settings or default_settings
    if verify_token is None or app_secret is None:
        configured_token, configured_secret = settings.require_webhook_secrets()
        verify_token = verify_token if verify_token is not None else configured_token
        app_secret = app_secret if app_secret is not None else configured_secret

    broadcaster = broadcaster or LoggingBroadcaster()

    controller = WebhookController(
        verifier=SignatureVerifier(app_secret),
        handshake=SubscriptionHandshake(verify_token),
        parser=EventParser(),
        dispatcher=EventDispatcher(call_manager, broadcaster),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if configure_logging:
            setup_app_logging()
        logger = get_app_logger()
        logger.info(
            f"🚀 wacall {settings.version} ready "
            f"(call manager: {type(call_manager).__name__}, "
            f"broadcaster: {type(broadcaster).__name__})"
        )
        try:
            yield
        finally:
            await broadcaster.close()
            logger.info("👋 wacall stopped")

    app = FastAPI(
        title="wacall",
        description="WhatsApp Business calling webhook bridge",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.webhook_controller = controller
    app.add_middleware(ErrorHandlerMiddleware)
    app.include_router(health_router)
    app.include_router(create_webhook_router(controller))
    return app


def create_default_app() -> FastAPI:
    """
    App factory used by the CLI server.

    Uses the logging-only call manager and the broadcaster selected by the
    environment (Redis Pub/Sub when REDIS_URL is set).
    """
    return create_app(LoggingCallManager(), create_broadcaster(default_settings))
