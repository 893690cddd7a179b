"""Staged Matcher - 후보별 단계적 저장소 조회

단계 (첫 번째 결과가 나오는 즉시 종료):
1. 제품명
2. 제품명 + 제조사
3. 제품명 + 제조사 + 모델명
4. 제조사 (제품명이 없을 때만)
5. 모델명 (제품명/제조사가 모두 없을 때만)

저장소 예외는 잡지 않습니다. "결과 없음"과 "저장소 장애"는 절대 섞이면 안 됩니다.
"""

import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from src.core.logging import logger
from src.engine.candidate import SearchCandidate
from src.engine.fields import SearchField, significant_value
from src.repositories.models import RecallProduct
from src.repositories.store import RecallStore


STAGE_PRODUCT = "product"
STAGE_PRODUCT_MANUFACTURER = "product+manufacturer"
STAGE_PRODUCT_MANUFACTURER_MODEL = "product+manufacturer+model"
STAGE_MANUFACTURER = "manufacturer"
STAGE_MODEL = "model"


@dataclass(frozen=True)
class StagedMatch:
    """단계 검색 적중 결과"""

    record: RecallProduct
    stage: str
    candidate: SearchCandidate


def _first(rows: Sequence[RecallProduct]) -> Optional[RecallProduct]:
    return rows[0] if rows else None


class StagedMatcher:
    """단계적 검색기

    Usage:
        matcher = StagedMatcher(store)
        match = matcher.match_any(candidates)
    """

    def __init__(self, store: RecallStore):
        self.store = store

    def match(self, candidate: SearchCandidate) -> Optional[StagedMatch]:
        """후보 한 건에 대해 단계 검색 실행"""
        product_name = significant_value(candidate.product_name, SearchField.PRODUCT)
        manufacturer = significant_value(candidate.manufacturer, SearchField.MANUFACTURER)
        model_name = significant_value(candidate.model_name, SearchField.MODEL)

        if product_name:
            record = _first(self.store.find_by_product_contains(product_name))
            if record is not None:
                return StagedMatch(record, STAGE_PRODUCT, candidate)

            if manufacturer:
                record = _first(
                    self.store.find_by_product_and_manufacturer_contains(product_name, manufacturer)
                )
                if record is not None:
                    return StagedMatch(record, STAGE_PRODUCT_MANUFACTURER, candidate)

                if model_name:
                    record = _first(
                        self.store.find_by_product_and_manufacturer_and_model_contains(
                            product_name, manufacturer, model_name
                        )
                    )
                    if record is not None:
                        return StagedMatch(record, STAGE_PRODUCT_MANUFACTURER_MODEL, candidate)
            return None

        if manufacturer:
            record = _first(self.store.find_by_manufacturer_contains(manufacturer))
            if record is not None:
                return StagedMatch(record, STAGE_MANUFACTURER, candidate)
            return None

        if model_name:
            record = _first(self.store.find_by_model_contains(model_name))
            if record is not None:
                return StagedMatch(record, STAGE_MODEL, candidate)

        return None

    def match_any(
        self,
        candidates: Iterable[SearchCandidate],
        cancel: Optional[threading.Event] = None,
    ) -> Optional[StagedMatch]:
        """후보를 순서대로 시도하고 첫 번째 적중을 반환

        cancel이 설정되면 다음 후보로 넘어가지 않고 None을 반환합니다.
        """
        tried = 0
        for candidate in candidates:
            if cancel is not None and cancel.is_set():
                logger.info(f"[Matcher] cancelled after {tried} candidates")
                return None
            tried += 1
            hit = self.match(candidate)
            if hit is not None:
                logger.info(
                    f"[Matcher] hit at candidate #{tried} stage={hit.stage} "
                    f"recall_sn={hit.record.recall_sn}"
                )
                return hit

        logger.info(f"[Matcher] no staged hit ({tried} candidates)")
        return None
