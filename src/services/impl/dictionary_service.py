"""리콜 사전 캐시 - DB에 존재하는 제조사/제품명/모델명 집합

검색어 변형(AI) 후보 중 "DB에 존재할 법한 것"만 남기는 데 사용합니다.

- 사전은 한 번 만들어지면 변경되지 않는 불변 스냅샷입니다.
- 재구성은 항상 전체 재구성이며, 새 스냅샷을 옆에서 완성한 뒤 참조만 교체합니다.
- 읽기는 잠금 없이 참조를 한 번 읽어 그 스냅샷으로만 판단합니다.
"""

from __future__ import annotations

import threading
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from src.core.logging import logger
from src.engine.fields import FIELD_SPECS, SearchField, normalize_for_field, record_value
from src.repositories.models import RecallProduct
from src.repositories.store import RecallStore
from src.utils.text import is_weak_query


@dataclass(frozen=True)
class Dictionary:
    """불변 사전 스냅샷 (모든 값은 필드별 정규화 문자열)"""

    manufacturers: frozenset[str] = field(default_factory=frozenset)
    products: frozenset[str] = field(default_factory=frozenset)
    models: frozenset[str] = field(default_factory=frozenset)
    built_at: Optional[datetime] = None
    record_count: int = 0

    @classmethod
    def empty(cls) -> "Dictionary":
        return cls()

    def entries(self, search_field: SearchField) -> frozenset[str]:
        return getattr(self, DICTIONARY_ATTRS[search_field])


# 필드 → 스냅샷 속성
DICTIONARY_ATTRS: dict[SearchField, str] = {
    SearchField.MANUFACTURER: "manufacturers",
    SearchField.PRODUCT: "products",
    SearchField.MODEL: "models",
}


def build_dictionary(records: Iterable[RecallProduct]) -> Dictionary:
    """레코드 전체를 한 번 순회하여 새 사전을 만든다"""
    buckets: dict[SearchField, set[str]] = {search_field: set() for search_field in FIELD_SPECS}
    count = 0

    for record in records:
        count += 1
        for search_field, bucket in buckets.items():
            normalized = normalize_for_field(record_value(record, search_field), search_field)
            if normalized and not is_weak_query(normalized):
                bucket.add(normalized)

    return Dictionary(
        **{DICTIONARY_ATTRS[f]: frozenset(bucket) for f, bucket in buckets.items()},
        built_at=datetime.now(),
        record_count=count,
    )


class RecallDictionaryService:
    """리콜 사전 캐시 서비스

    Usage:
        service = RecallDictionaryService(recall_store_scope)
        service.refresh()  # 기동 시 1회 + 데이터 전체 갱신 후마다

        service.filter_candidates(["sunnybury", "써니버리"], SearchField.MANUFACTURER, limit=10)
    """

    def __init__(self, store_scope: Callable[[], AbstractContextManager[RecallStore]]):
        self._store_scope = store_scope
        # 참조 교체는 원자적이므로 읽기 쪽은 잠그지 않음
        self._dict_ref: Dictionary = Dictionary.empty()
        # 재구성끼리만 직렬화
        self._refresh_lock = threading.Lock()

    @property
    def snapshot(self) -> Dictionary:
        return self._dict_ref

    def refresh(self) -> Dictionary:
        """DB 전체를 스캔해 새 사전을 만든 뒤 참조를 교체

        Raises:
            StoreException: 저장소 조회 실패 (기존 스냅샷은 그대로 유지)
        """
        with self._refresh_lock:
            start = time.perf_counter()
            logger.info("[Dictionary] refresh started")

            with self._store_scope() as store:
                records = store.find_all()
                new_dict = build_dictionary(records)

            self._dict_ref = new_dict

            took_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"[Dictionary] refresh done - rows={new_dict.record_count}, "
                f"manu={len(new_dict.manufacturers)}, prod={len(new_dict.products)}, "
                f"model={len(new_dict.models)}, took={took_ms:.0f}ms"
            )
            return new_dict

    def refresh_safely(self) -> bool:
        """기동/스케줄러용 재구성 - 실패해도 이전 스냅샷으로 계속 동작"""
        try:
            self.refresh()
            return True
        except Exception as e:
            logger.error(
                f"[Dictionary] refresh failed, keeping previous snapshot: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return False

    def filter_candidates(
        self, candidates: Optional[Iterable[Optional[str]]], search_field: SearchField, limit: int
    ) -> list[str]:
        """후보 중 DB에 존재할 법한 것만 남김

        1순위: 정규화 후 정확히 일치하는 것
        2순위: 정확 일치가 하나도 없으면 사전 항목이 후보를 포함하는 것 (부분 포함)
        둘 다 비면 해당 필드는 신뢰할 후보가 없는 것으로 처리합니다.
        """
        if not candidates or limit <= 0:
            return []

        normalized = self._normalize_candidates(candidates, search_field)
        if not normalized:
            return []

        # 스냅샷 1회 역참조
        dictionary = self._dict_ref

        exact = [c for c in normalized if self._contains_exact(dictionary, search_field, c)][:limit]
        if exact:
            return exact

        return [c for c in normalized if self._contains_fuzzy(dictionary, search_field, c)][:limit]

    def might_exist(self, term: Optional[str], search_field: SearchField) -> bool:
        """단일 용어가 DB에 존재할 법한지 (정확 일치 → 부분 포함)"""
        normalized = normalize_for_field(term, search_field)
        if not normalized or is_weak_query(normalized):
            return False

        dictionary = self._dict_ref
        return self._contains_exact(dictionary, search_field, normalized) or self._contains_fuzzy(
            dictionary, search_field, normalized
        )

    def stats(self) -> dict[str, Any]:
        dictionary = self._dict_ref
        return {
            "manufacturers": len(dictionary.manufacturers),
            "products": len(dictionary.products),
            "models": len(dictionary.models),
            "record_count": dictionary.record_count,
            "built_at": dictionary.built_at.isoformat() if dictionary.built_at else None,
        }

    @staticmethod
    def _normalize_candidates(
        candidates: Iterable[Optional[str]], search_field: SearchField
    ) -> list[str]:
        seen: set[str] = set()
        out: list[str] = []
        for candidate in candidates:
            if not candidate or not candidate.strip():
                continue
            normalized = normalize_for_field(candidate, search_field)
            if not normalized or is_weak_query(normalized) or normalized in seen:
                continue
            seen.add(normalized)
            out.append(normalized)
        return out

    @staticmethod
    def _contains_exact(dictionary: Dictionary, search_field: SearchField, value: str) -> bool:
        return value in dictionary.entries(search_field)

    @staticmethod
    def _contains_fuzzy(dictionary: Dictionary, search_field: SearchField, value: str) -> bool:
        return any(value in entry for entry in dictionary.entries(search_field))
