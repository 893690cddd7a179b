"""비즈니스 로직 서비스 - export only."""

from .impl import (
    ImageAnalysisService,
    InMemoryVariantCache,
    OpenAIVariantGenerator,
    RecallDictionaryService,
    RedisVariantCache,
    VariantFilter,
    create_variant_cache,
)

__all__ = [
    "RecallDictionaryService",
    "VariantFilter",
    "OpenAIVariantGenerator",
    "InMemoryVariantCache",
    "RedisVariantCache",
    "create_variant_cache",
    "ImageAnalysisService",
]
