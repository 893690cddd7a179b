"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from src import __version__
from src.api.routes.recall_routes import get_dictionary_service, get_variant_cache
from src.core.config import settings
from src.core.database import engine
from src.core.logging import logger
from src.schemas.recall_schema import HealthResponse
from src.services.impl.dictionary_service import RecallDictionaryService
from src.services.impl.variant_cache import RedisVariantCache, VariantCache

router = APIRouter(tags=["health"])


def _store_reachable() -> bool:
    try:
        with engine.connect() as connection:
            connection.exec_driver_sql("SELECT 1")
        return True
    except SQLAlchemyError as e:
        logger.error(f"[Health] recall store unreachable: {e}")
        return False


def _cache_status(variant_cache: VariantCache) -> tuple[str, bool]:
    """(백엔드 이름, 정상 여부) - 메모리 캐시는 항상 정상"""
    if isinstance(variant_cache, RedisVariantCache):
        return "redis", variant_cache.health_check()
    return "memory", True


@router.get("/health", response_model=HealthResponse)
async def health_check(
    dictionary_service: RecallDictionaryService = Depends(get_dictionary_service),
    variant_cache: VariantCache = Depends(get_variant_cache),
):
    """
    헬스 체크

    저장소가 죽으면 error, 캐시만 죽으면 degraded (검색은 캐시 없이 계속 가능)
    """
    store_ok = _store_reachable()
    cache_backend, cache_ok = _cache_status(variant_cache)

    if not store_ok:
        status = "error"
    elif not cache_ok:
        status = "degraded"
    else:
        status = "ok"

    stats = dictionary_service.stats()

    return HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=__version__,
        store=store_ok,
        variant_cache=cache_backend,
        dictionary_size=stats["manufacturers"] + stats["products"] + stats["models"],
    )


@router.get("/")
async def root():
    return {
        "service": settings.api_title,
        "version": __version__,
        "docs": "/docs",
    }
