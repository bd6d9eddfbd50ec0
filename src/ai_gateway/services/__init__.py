"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_key import derive_cache_key
from .gateway_service import GatewayService
from .request_normalizer import NormalizedRequest, RequestNormalizer
from .response_normalizer import ResponseNormalizer

__all__ = [
    "GatewayService",
    "NormalizedRequest",
    "RequestNormalizer",
    "ResponseNormalizer",
    "derive_cache_key",
]
