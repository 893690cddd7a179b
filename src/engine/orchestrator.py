"""Recall Search Orchestrator - Main Engine Entry Point

Coordinates the entire recall lookup pipeline:
1. Input validation (+ optional image analysis)
2. Normalization and weak-query filtering
3. Variant expansion (AI → clean → dictionary filter)
4. Candidate composition and staged store search
5. Full-scan partial match fallback
6. Risk scoring
"""

from __future__ import annotations

import asyncio
import threading
import time
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Callable, Optional

from src.core.config import settings
from src.core.exceptions import ExternalCapabilityException, StoreException
from src.core.logging import logger, sanitize_for_log
from src.repositories.models import RecallProduct
from src.repositories.store import RecallStore
from src.utils.image_utils import is_valid_image, parse_analysis_result

from .candidate import SearchCandidate, compose_candidates
from .fallback_scanner import FallbackScanner
from .fields import SearchField, significant_value
from .result import RecallSearchResult
from .risk import calculate_risk_score, risk_level_from_score
from .staged_matcher import StagedMatcher

if TYPE_CHECKING:
    from src.services.impl.image_analysis import ImageAnalysisService
    from src.services.impl.variant_filter import VariantFilter


STAGE_FALLBACK = "fallback"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class RecallSearchOrchestrator:
    """리콜 검색 오케스트레이터

    요청마다 단계를 순차 실행합니다. 공유 상태(사전 스냅샷, 변형 캐시)는
    읽기만 하므로 요청이 중간에 취소되어도 남는 부작용이 없습니다.
    """

    def __init__(
        self,
        variant_filter: VariantFilter,
        store_scope: Callable[[], AbstractContextManager[RecallStore]],
        image_analyzer: Optional[ImageAnalysisService] = None,
        store_timeout_s: Optional[float] = None,
    ):
        """
        Args:
            variant_filter: 검색어 변형 필터
            store_scope: 저장소 스코프 팩토리 (with 블록 동안 RecallStore 제공)
            image_analyzer: 이미지 분석 서비스 (None이면 이미지 무시)
            store_timeout_s: 단계 검색 + 전체 스캔 상한 (기본값: settings)
        """
        if variant_filter is None:
            raise ValueError("variant_filter must not be None")
        if store_scope is None:
            raise ValueError("store_scope must not be None")

        self.variant_filter = variant_filter
        self.store_scope = store_scope
        self.image_analyzer = image_analyzer
        self.store_timeout_s = store_timeout_s or settings.store_query_timeout_s

    async def search(
        self,
        product_name: Optional[str] = None,
        manufacturer: Optional[str] = None,
        model_name: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
        image_content_type: Optional[str] = None,
    ) -> RecallSearchResult:
        """통합 리콜 검색

        Returns:
            RecallSearchResult: 표준화된 검색 결과 (저장소 장애도 예외가 아닌 결과로 반환)
        """
        start = time.monotonic()

        def elapsed_ms() -> float:
            return (time.monotonic() - start) * 1000

        has_text = not all(_is_blank(v) for v in (product_name, manufacturer, model_name))
        has_image = is_valid_image(image_bytes, image_content_type)
        if not has_text and not has_image:
            logger.info("[Search] invalid input: no text fields and no valid image")
            return RecallSearchResult.invalid_input(
                "제품명, 제조사, 모델명 중 하나 이상을 입력하거나 제품 사진을 첨부해 주세요.",
                elapsed_ms(),
            )

        if has_image:
            product_name, manufacturer, model_name = await self._fill_from_image(
                image_bytes, image_content_type, product_name, manufacturer, model_name
            )

        product_q = significant_value(product_name, SearchField.PRODUCT)
        manufacturer_q = significant_value(manufacturer, SearchField.MANUFACTURER)
        model_q = significant_value(model_name, SearchField.MODEL)

        logger.info(
            f"[Search] started: product='{sanitize_for_log(product_q or '')}', "
            f"manufacturer='{sanitize_for_log(manufacturer_q or '')}', "
            f"model='{sanitize_for_log(model_q or '')}'"
        )

        if not (product_q or manufacturer_q or model_q):
            # 약한 입력뿐이면 저장소를 조회하지 않음
            logger.info("[Search] all fields weak, skipping store lookup")
            return RecallSearchResult.no_match(elapsed_ms())

        products = await self._expand(product_q, SearchField.PRODUCT)
        manufacturers = await self._expand(manufacturer_q, SearchField.MANUFACTURER)
        models = await self._expand(model_q, SearchField.MODEL)
        candidates = compose_candidates(products, manufacturers, models)

        # 워커 스레드는 강제 종료할 수 없으므로 타임아웃/취소 시 남은 단계를 건너뛰게 한다
        cancel = threading.Event()
        try:
            record, stage, candidate = await asyncio.wait_for(
                asyncio.to_thread(self._lookup, candidates, product_q, manufacturer_q, model_q, cancel),
                timeout=self.store_timeout_s,
            )
        except StoreException as e:
            logger.error(f"[Search] store failure: {e}", exc_info=True)
            return RecallSearchResult.store_failure(e.error_code, elapsed_ms())
        except asyncio.TimeoutError:
            cancel.set()
            logger.error(f"[Search] store lookup timed out after {self.store_timeout_s}s")
            return RecallSearchResult.timeout(elapsed_ms())
        except asyncio.CancelledError:
            cancel.set()
            raise

        if record is None:
            logger.info(f"[Search] no match ({len(candidates)} candidates, {elapsed_ms():.0f}ms)")
            return RecallSearchResult.no_match(elapsed_ms())

        score = calculate_risk_score(
            candidate.product_name, candidate.manufacturer, candidate.model_name, record
        )
        level = risk_level_from_score(score)
        logger.info(
            f"[Search] matched recall_sn={record.recall_sn} stage={stage} "
            f"score={score} level={level.value} ({elapsed_ms():.0f}ms)"
        )
        return RecallSearchResult.matched(
            record=record,
            risk_score=score,
            risk_level=level,
            candidate=candidate,
            stage=stage,
            elapsed_ms=elapsed_ms(),
            partial=stage == STAGE_FALLBACK,
        )

    async def _expand(self, query: Optional[str], field: SearchField) -> list[str]:
        if not query:
            return []
        return await self.variant_filter.expand(query, field)

    def _lookup(
        self,
        candidates: list[SearchCandidate],
        product_q: Optional[str],
        manufacturer_q: Optional[str],
        model_q: Optional[str],
        cancel: Optional[threading.Event] = None,
    ) -> tuple[Optional[RecallProduct], Optional[str], Optional[SearchCandidate]]:
        """단계 검색 → 전체 스캔 (워커 스레드에서 실행)

        저장소 예외는 그대로 전파됩니다. cancel이 설정되면 남은 조회 없이 빈 결과.
        """
        with self.store_scope() as store:
            hit = StagedMatcher(store).match_any(candidates, cancel)
            if hit is not None:
                return hit.record, hit.stage, hit.candidate

            record = FallbackScanner(store).scan(product_q, manufacturer_q, cancel)
            if record is not None:
                # 전체 스캔 적중은 정규화된 원본 질의로 채점
                query = SearchCandidate(product_q, manufacturer_q, model_q)
                return record, STAGE_FALLBACK, query

        return None, None, None

    async def _fill_from_image(
        self,
        image_bytes: bytes,
        content_type: Optional[str],
        product_name: Optional[str],
        manufacturer: Optional[str],
        model_name: Optional[str],
    ) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """이미지 분석 결과로 비어 있는 필드만 채움 (실패 시 입력 그대로)"""
        if self.image_analyzer is None or not self.image_analyzer.enabled:
            logger.info("[Search] image analysis unavailable, using text fields only")
            return product_name, manufacturer, model_name

        try:
            text = await self.image_analyzer.analyze(image_bytes, content_type)
        except ExternalCapabilityException as e:
            logger.warning(f"[Search] image analysis degraded: {e}")
            return product_name, manufacturer, model_name

        extracted = parse_analysis_result(text)
        logger.info(
            f"[Search] image extracted: product='{sanitize_for_log(extracted.product_name or '')}', "
            f"manufacturer='{sanitize_for_log(extracted.manufacturer or '')}', "
            f"model='{sanitize_for_log(extracted.model_name or '')}'"
        )
        return (
            extracted.product_name if _is_blank(product_name) else product_name,
            extracted.manufacturer if _is_blank(manufacturer) else manufacturer,
            extracted.model_name if _is_blank(model_name) else model_name,
        )
