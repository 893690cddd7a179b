"""해싱/캐시 키 유틸리티"""
import hashlib
from typing import Optional


def hash_string(text: str) -> str:
    """
    문자열을 MD5 해시로 변환

    Args:
        text: 해시할 문자열

    Returns:
        MD5 해시 문자열
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def generate_variant_cache_key(field_name: Optional[str], normalized_query: str) -> str:
    """
    검색어 변형 캐시 키 생성: (필드 or ANY) + '|' + 정규화된 원문

    Args:
        field_name: 필드 이름 (MANUFACTURER/PRODUCT/MODEL), 없으면 ANY
        normalized_query: 정규화된 원본 검색어

    Returns:
        캐시 키
    """
    return f"{field_name or 'ANY'}|{normalized_query}"


def generate_redis_variant_key(cache_key: str) -> str:
    """Redis 저장용 키 (한글/공백이 섞인 원문 대신 해시 사용)"""
    return f"recall:variants:{hash_string(cache_key)}"
