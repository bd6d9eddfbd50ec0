import json
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_gateway.api.dependencies import HandlerDep, build_lifespan
from ai_gateway.config import settings
from ai_gateway.dto import CacheStatsResponse, HealthCheckResponse
from ai_gateway.errors import ValidationError
from ai_gateway.handlers import GatewayHandler
from ai_gateway.protocols import CacheStore, ChatProvider

GATEWAY_PATH = "/api/ai"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def read_json_body(request: Request) -> Any:
    """Parse the request body, treating an empty body as `{}`.

    Raises:
        ValidationError: If the body is not valid JSON or is nested too deeply
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValidationError("Request body is nested too deeply") from e
    except ValueError as e:
        raise ValidationError(f"Request body is not valid JSON: {e}") from e


def create_app(
    cache: CacheStore | None = None,
    chat_provider: ChatProvider | None = None,
) -> FastAPI:
    """Create the gateway FastAPI application.

    Args:
        cache: Optional cache store (defaults to a fresh in-memory store per app).
        chat_provider: Optional upstream provider (defaults to OpenAI).

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="AI Gateway",
        description="Caching gateway in front of a chat-completion provider",
        version="0.1.0",
        lifespan=build_lifespan(cache=cache, chat_provider=chat_provider),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "AI Gateway",
            "version": "0.1.0",
            "description": "Caching gateway in front of a chat-completion provider",
            "endpoints": {
                "gateway": GATEWAY_PATH,
                "stats": "/cache/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post(GATEWAY_PATH)
    async def complete(request: Request, handler: HandlerDep) -> JSONResponse:
        """
        Answer a chat request, from cache when an equivalent request was seen.

        The body is loosely structured; see GatewayRequest for recognized fields.
        """
        try:
            body = await read_json_body(request)
        except ValidationError as e:
            return handler.error_response(e)
        return await handler.complete(body)

    @app.api_route(GATEWAY_PATH, methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def method_not_allowed() -> JSONResponse:
        """Reject every verb other than POST."""
        return GatewayHandler.method_not_allowed()

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def cache_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.delete("/cache")
    async def clear_cache(handler: HandlerDep) -> dict:
        """Clear all entries from the cache."""
        return await handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ai_gateway.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
