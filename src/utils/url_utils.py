"""URL 유틸리티"""
from typing import Optional
from urllib.parse import urlencode

from src.core.config import settings


def build_recall_detail_url(recall_sn: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """
    리콜 상세 페이지 URL 생성

    Examples:
        >>> build_recall_detail_url("R-001", "https://example.com/detail.do")
        'https://example.com/detail.do?recallSn=R-001'

    Args:
        recall_sn: 리콜번호
        base_url: 상세 페이지 기본 URL (기본값: settings.recall_detail_base_url)

    Returns:
        상세 URL 또는 None
    """
    if not recall_sn:
        return None

    base = base_url or settings.recall_detail_base_url
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{urlencode({'recallSn': recall_sn})}"
