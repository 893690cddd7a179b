"""Recall Routes (Engine Layer)

HTTP Layer가 Engine Layer로 요청을 위임하는 단순한 Translator 역할만 수행합니다.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from src.core.config import settings
from src.core.logging import logger
from src.engine import RecallSearchOrchestrator, RecallSearchResult, SearchStatus
from src.repositories.impl.recall_repository import recall_store_scope
from src.schemas.recall_schema import DictionaryStatsResponse, RecallSearchResponse
from src.services.impl.dictionary_service import RecallDictionaryService
from src.services.impl.image_analysis import ImageAnalysisService
from src.services.impl.variant_cache import VariantCache, create_variant_cache
from src.services.impl.variant_filter import VariantFilter
from src.services.impl.variant_generator import OpenAIVariantGenerator

router = APIRouter(prefix="/api/v1", tags=["recall"])

# 상태 → HTTP 상태 코드
STATUS_HTTP_CODES = {
    SearchStatus.FOUND: status.HTTP_200_OK,
    SearchStatus.PARTIAL_MATCH: status.HTTP_200_OK,
    SearchStatus.NO_MATCH: status.HTTP_404_NOT_FOUND,
    SearchStatus.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    SearchStatus.STORE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
    SearchStatus.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}

# 싱글톤 서비스
_dictionary_service: Optional[RecallDictionaryService] = None
_variant_cache: Optional[VariantCache] = None
_orchestrator: Optional[RecallSearchOrchestrator] = None


def get_dictionary_service() -> RecallDictionaryService:
    """RecallDictionaryService 싱글톤"""
    global _dictionary_service
    if _dictionary_service is None:
        _dictionary_service = RecallDictionaryService(recall_store_scope)
    return _dictionary_service


def get_variant_cache() -> VariantCache:
    """VariantCache 싱글톤 (redis_url이 있으면 Redis, 없으면 메모리)"""
    global _variant_cache
    if _variant_cache is None:
        _variant_cache = create_variant_cache(
            settings.redis_url,
            ttl_seconds=settings.variant_cache_ttl,
            max_size=settings.variant_cache_max_size,
        )
    return _variant_cache


def get_orchestrator(
    dictionary_service: RecallDictionaryService = Depends(get_dictionary_service),
    variant_cache: VariantCache = Depends(get_variant_cache),
) -> RecallSearchOrchestrator:
    """RecallSearchOrchestrator 싱글톤

    Engine Layer의 진입점을 제공합니다.
    """
    global _orchestrator
    if _orchestrator is None:
        variant_filter = VariantFilter(
            generator=OpenAIVariantGenerator(),
            dictionary=dictionary_service,
            cache=variant_cache,
            limit=settings.variant_limit,
        )
        _orchestrator = RecallSearchOrchestrator(
            variant_filter=variant_filter,
            store_scope=recall_store_scope,
            image_analyzer=ImageAnalysisService(),
            store_timeout_s=settings.store_query_timeout_s,
        )
    return _orchestrator


@router.post("/recalls/search", response_model=RecallSearchResponse)
async def search_recall(
    response: Response,
    product_name: Optional[str] = Form(None),
    manufacturer: Optional[str] = Form(None),
    model_name: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    orchestrator: RecallSearchOrchestrator = Depends(get_orchestrator),
):
    """리콜 검색 API

    HTTP → Engine → 변형 확장 / 단계 검색 / 전체 스캔 / 위험도 파이프라인으로 실행

    Flow:
        1. multipart 요청 수신 (텍스트 필드 + 선택 이미지)
        2. Engine에 위임 (하드 타임아웃)
        3. 결과 상태를 HTTP 상태 코드와 응답 본문으로 변환
    """
    image_bytes: Optional[bytes] = None
    image_content_type: Optional[str] = None
    if image is not None:
        image_bytes = await image.read()
        image_content_type = image.content_type
        logger.info(f"[API] image attached: {len(image_bytes)} bytes, type={image_content_type}")

    try:
        result = await asyncio.wait_for(
            orchestrator.search(
                product_name=product_name,
                manufacturer=manufacturer,
                model_name=model_name,
                image_bytes=image_bytes,
                image_content_type=image_content_type,
            ),
            timeout=settings.api_recall_search_timeout_s,
        )
    except asyncio.TimeoutError:
        logger.error(f"[API] search timeout after {settings.api_recall_search_timeout_s}s")
        result = RecallSearchResult.timeout(settings.api_recall_search_timeout_s * 1000)

    response.status_code = STATUS_HTTP_CODES.get(result.status, status.HTTP_200_OK)
    logger.info(f"[API] search finished: status={result.status.value}, http={response.status_code}")
    return RecallSearchResponse.from_result(result)


@router.post("/recalls/dictionary/refresh", response_model=DictionaryStatsResponse)
async def refresh_dictionary(
    response: Response,
    dictionary_service: RecallDictionaryService = Depends(get_dictionary_service),
):
    """사전 캐시 재구성 (수집 배치 완료 후 호출)

    재구성 실패 시 이전 스냅샷을 유지하고 503을 반환합니다.
    """
    refreshed = await asyncio.to_thread(dictionary_service.refresh_safely)
    if not refreshed:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return DictionaryStatsResponse(**dictionary_service.stats(), refreshed=refreshed)
