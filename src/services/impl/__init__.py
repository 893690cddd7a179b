"""Services implementation package."""

from .dictionary_service import Dictionary, RecallDictionaryService, build_dictionary
from .image_analysis import ImageAnalysisService
from .variant_cache import InMemoryVariantCache, RedisVariantCache, VariantCache, create_variant_cache
from .variant_filter import VariantFilter
from .variant_generator import OpenAIVariantGenerator, VariantGenerator

__all__ = [
    "Dictionary",
    "RecallDictionaryService",
    "build_dictionary",
    "ImageAnalysisService",
    "VariantCache",
    "InMemoryVariantCache",
    "RedisVariantCache",
    "create_variant_cache",
    "VariantFilter",
    "VariantGenerator",
    "OpenAIVariantGenerator",
]
