"""Text utilities for recall matching."""

from .normalize import (
    is_weak_query,
    normalize_manufacturer,
    normalize_text,
    tokens_of,
)

__all__ = [
    "normalize_text",
    "normalize_manufacturer",
    "is_weak_query",
    "tokens_of",
]
