"""검색어 변형 필터 (AI 변형 → 정제 → 사전 검증)

외부 변형 생성기가 준 후보를 정제/중복 제거/상한 적용한 뒤
RecallDictionaryService로 "DB에 존재할 법한" 후보만 남깁니다.
외부 호출 실패는 절대 호출자에게 전파하지 않고 원본 검색어 하나로 강등합니다.
"""

from __future__ import annotations

from typing import Iterable, Optional

from src.core.logging import logger, sanitize_for_log
from src.engine.fields import SearchField, normalize_for_field
from src.services.impl.dictionary_service import RecallDictionaryService
from src.services.impl.variant_cache import VariantCache
from src.services.impl.variant_generator import VariantGenerator
from src.utils.hash_utils import generate_variant_cache_key
from src.utils.resource_loader import load_invalid_variant_terms
from src.utils.text import is_weak_query, normalize_text


DEFAULT_VARIANT_LIMIT = 10


class VariantFilter:
    """검색어 확장 서비스

    Usage:
        variants = await variant_filter.expand("sunnybury baby", SearchField.MANUFACTURER)
    """

    def __init__(
        self,
        generator: VariantGenerator,
        dictionary: RecallDictionaryService,
        cache: VariantCache,
        limit: int = DEFAULT_VARIANT_LIMIT,
    ):
        self.generator = generator
        self.dictionary = dictionary
        self.cache = cache
        self.limit = limit

    async def expand(self, original_query: Optional[str], field: Optional[SearchField]) -> list[str]:
        """원본 검색어를 변형 후보 리스트로 확장

        Args:
            original_query: 정규화된 원본 검색어
            field: 검색 필드 (None이면 사전 필터 생략)

        Returns:
            채택된 변형 리스트 (최대 limit개).
            약한 검색어면 빈 리스트, 외부 호출 실패 시 [원본].
        """
        # 한 글자/초성 등 노이즈 강한 질의는 확장 자체를 생략
        if is_weak_query(original_query):
            logger.info(f"[Variants] weak query, skipping expansion: '{sanitize_for_log(original_query or '')}'")
            return []

        normalized = self._normalize(original_query, field)
        if not normalized:
            return []

        if not self.generator.enabled:
            logger.debug("[Variants] generator disabled, using original query only")
            return [normalized]

        cache_key = generate_variant_cache_key(field.value if field else None, normalized)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"[Variants] cache hit: key={cache_key} (size={len(cached)})")
            return cached

        try:
            raw_candidates = await self.generator.generate(normalized, field)
        except Exception as e:
            # 품질 저하로만 처리 (검색은 원본으로 계속)
            logger.warning(
                f"[Variants] generation failed, degrading to original query: "
                f"{type(e).__name__}: {e}"
            )
            return [normalized]

        cleaned = self.clean_and_dedup(raw_candidates, field)

        if field is not None:
            accepted = self.dictionary.filter_candidates(cleaned, field, self.limit)
        else:
            accepted = cleaned[: self.limit]

        if not accepted:
            logger.info(
                f"[Variants] no trusted variant for field={field.value if field else 'ANY'}, "
                f"query='{sanitize_for_log(normalized)}' (cleaned={len(cleaned)})"
            )

        self.cache.set(cache_key, accepted)
        return accepted

    def clean_and_dedup(
        self, candidates: Optional[Iterable[Optional[str]]], field: Optional[SearchField]
    ) -> list[str]:
        """금지어/공백/약한 검색어 제거 + 중복 제거 + 상한 적용"""
        if not candidates:
            return []

        invalid_terms = load_invalid_variant_terms()
        seen: set[str] = set()
        out: list[str] = []

        for candidate in candidates:
            if candidate is None:
                continue
            trimmed = candidate.strip()
            if not trimmed or trimmed.lower() in invalid_terms:
                continue
            normalized = self._normalize(trimmed, field)
            if not normalized or is_weak_query(normalized):
                continue
            if normalized in invalid_terms or normalized in seen:
                continue
            seen.add(normalized)
            out.append(normalized)
            if len(out) >= self.limit:
                break

        return out

    @staticmethod
    def _normalize(value: Optional[str], field: Optional[SearchField]) -> Optional[str]:
        if field is None:
            return normalize_text(value)
        return normalize_for_field(value, field)
