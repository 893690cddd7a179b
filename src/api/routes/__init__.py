"""API routes package."""

from .recall_routes import router as recall_router, get_dictionary_service, get_orchestrator, get_variant_cache
from .health_routes import router as health_router

__all__ = ["health_router", "recall_router", "get_dictionary_service", "get_orchestrator", "get_variant_cache"]
