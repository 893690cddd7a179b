"""API 엔드포인트 패키지 - export only."""

from .routes import health_router, recall_router, get_dictionary_service, get_orchestrator, get_variant_cache

__all__ = ["health_router", "recall_router", "get_dictionary_service", "get_orchestrator", "get_variant_cache"]
