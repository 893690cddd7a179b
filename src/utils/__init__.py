"""Utilities package - Flat structure (no nested directories)

text/ 만 정규화 규칙이 많아 별도 패키지로 유지합니다.
"""

# Hash utilities
from .hash_utils import hash_string, generate_variant_cache_key, generate_redis_variant_key

# URL utilities
from .url_utils import build_recall_detail_url

# Image input
from .image_utils import ExtractedFields, is_valid_image, parse_analysis_result

# Text utilities
from .text import is_weak_query, normalize_manufacturer, normalize_text, tokens_of

__all__ = [
    # hash
    "hash_string",
    "generate_variant_cache_key",
    "generate_redis_variant_key",
    # url
    "build_recall_detail_url",
    # image
    "ExtractedFields",
    "is_valid_image",
    "parse_analysis_result",
    # text
    "normalize_text",
    "normalize_manufacturer",
    "is_weak_query",
    "tokens_of",
]
