"""HTTP handlers for gateway operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error bodies.
"""

import logging
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from ai_gateway.dto import (
    CacheStatsResponse,
    ChatCompletionResponse,
    ErrorResponse,
    HealthCheckResponse,
)
from ai_gateway.errors import GatewayError, TransportError, UpstreamError, ValidationError
from ai_gateway.services import GatewayService

logger = logging.getLogger(__name__)


class GatewayHandler:
    """HTTP handlers for gateway operations.

    This handler delegates business logic to GatewayService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Turning gateway errors into error bodies
    """

    def __init__(self, gateway_service: GatewayService) -> None:
        """Initialize the gateway handler.

        Args:
            gateway_service: The gateway service for business logic (required).
        """
        self._gateway = gateway_service

    async def complete(self, body: Any) -> JSONResponse:
        """Handle POST /api/ai requests.

        Args:
            body: The parsed JSON body

        Returns:
            200 with the chat completion, or the error body for the failure
        """
        try:
            response = await self._gateway.complete(body)
        except GatewayError as e:
            return self.error_response(e)

        payload = ChatCompletionResponse.from_content(response.content, cached=response.cached)
        return JSONResponse(status_code=status.HTTP_200_OK, content=payload.model_dump())

    @staticmethod
    def error_response(error: GatewayError) -> JSONResponse:
        """Convert a gateway error to its HTTP response.

        Upstream errors keep the provider's status and body unchanged.
        """
        if isinstance(error, UpstreamError):
            logger.warning("Upstream failure %d passed through to caller", error.status)
            body = ErrorResponse(error=error.public_message, status=error.status, body=error.body)
        elif isinstance(error, (TransportError, ValidationError)):
            logger.warning("%s: %s", type(error).__name__, error.message)
            body = ErrorResponse(error=error.public_message, details=error.message)
        elif error.message != error.public_message:
            logger.error("%s: %s", type(error).__name__, error.message)
            body = ErrorResponse(error=error.public_message, details=error.message)
        else:
            logger.error("%s: %s", type(error).__name__, error.message)
            body = ErrorResponse(error=error.public_message)

        return JSONResponse(
            status_code=error.status_code,
            content=body.model_dump(exclude_none=True),
        )

    @staticmethod
    def method_not_allowed() -> JSONResponse:
        """Handle any verb other than POST on the gateway route."""
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content=ErrorResponse(error="Method not allowed").model_dump(exclude_none=True),
            headers={"Allow": "POST"},
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        stats = self._gateway.get_stats()

        return CacheStatsResponse(
            total_entries=stats.get("total_entries", 0),
            max_entries=stats.get("max_entries", 1),
            ttl_seconds=stats.get("ttl", 1),
            evictions=stats.get("evictions", 0),
            expirations=stats.get("expirations", 0),
            cache_hits=stats.get("cache_hits", 0),
            cache_misses=stats.get("cache_misses", 0),
            hit_rate=stats.get("hit_rate", 0.0),
            upstream_calls=stats.get("upstream_calls", 0),
            upstream_failures=stats.get("upstream_failures", 0),
        )

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests.

        Returns:
            Dict with clear operation result
        """
        count = self._gateway.clear()

        return {
            "success": True,
            "deleted_count": count,
            "message": "Cache cleared successfully",
        }

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        configured = self._gateway.is_configured

        return HealthCheckResponse(
            status="healthy" if configured else "degraded",
            credentials_configured=configured,
        )
