"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - The response cache lives exactly as long as the app instance
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from ai_gateway.config import settings
from ai_gateway.handlers import GatewayHandler
from ai_gateway.logging_config import configure_logging
from ai_gateway.protocols import CacheStore, ChatProvider
from ai_gateway.repositories import InMemoryCacheRepository, OpenAIChatClient
from ai_gateway.services import GatewayService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> GatewayHandler:
    """Dependency injection for GatewayHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The GatewayHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "gateway_handler", None)
    if handler is None:
        raise RuntimeError("GatewayHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    cache: CacheStore | None = None,
    chat_provider: ChatProvider | None = None,
):
    """Build the lifespan context manager for a FastAPI app.

    Args:
        cache: Cache store to use. If None, an InMemoryCacheRepository is created.
        chat_provider: Upstream provider to use. If None, an OpenAIChatClient is created
                       and closed on shutdown.

    Returns:
        An async context manager factory suitable for FastAPI(lifespan=...)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)

        repository = cache if cache is not None else InMemoryCacheRepository.create()
        owned_client = OpenAIChatClient.create() if chat_provider is None else None
        provider = chat_provider if chat_provider is not None else owned_client

        gateway_service = GatewayService.create(cache=repository, chat_provider=provider)
        gateway_handler = GatewayHandler(gateway_service=gateway_service)

        # Store in app.state (FastAPI pattern)
        app.state.gateway_service = gateway_service
        app.state.gateway_handler = gateway_handler

        stats = repository.get_stats()
        logger.info(
            "Gateway initialized: max_entries=%s ttl=%ss credentials_configured=%s",
            stats.get("max_entries"),
            stats.get("ttl"),
            provider.is_configured,
        )
        if not provider.is_configured:
            logger.warning("OPENAI_API_KEY is not set; cache misses will fail with a config error")

        yield

        if owned_client is not None:
            await owned_client.close()
        del app.state.gateway_handler
        del app.state.gateway_service
        logger.info("Gateway shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[GatewayHandler, Depends(get_handler)]