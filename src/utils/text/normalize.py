"""리콜 매칭용 텍스트 정규화.

모든 함수는 순수 함수이며 None/빈 문자열을 포함한 어떤 입력에도 예외를 던지지 않습니다.
정규화 결과가 비어 있으면 "정보 없음"을 뜻하는 None을 반환합니다.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional


# 완성형이 아닌 한글 자모 (호환 자모, 조합형 자모, 확장 A/B, 반각 자모)
_JAMO_CLASS = "ᄀ-ᇿㄱ-ㆎꥠ-꥿ힰ-퟿ﾠ-ￜ"
_JAMO_RE = re.compile(f"[{_JAMO_CLASS}]")
_JAMO_ONLY_RE = re.compile(f"^[\\s{_JAMO_CLASS}]+$")
_WHITESPACE_RE = re.compile(r"\s+")

# 다양한 대시/하이픈 글리프 → '-'
_DASH_RE = re.compile("[·•‐-―−﹘﹣－]")

# 단어 경계: 앞뒤가 영숫자(모든 문자 체계)가 아닌 위치
_WORD_BEFORE = r"(?<![^\W_])"
_WORD_AFTER = r"(?![^\W_])"

# 영문 회사 형태
EN_COMPANY_SUFFIXES: tuple[str, ...] = (
    r"inc\.?", r"ltd\.?", r"co\.?", r"corp\.?",
    "corporation", "company", "limited", "llc", "plc", "pte", "gmbh",
    r"s\.a\.?", r"s\.?r\.?l\.?", "srl", "bv", "ag", "kg", "oy", "sa", "kk",
)

# 한국어 회사 형태 (괄호형/단독형)
KO_COMPANY_FORMS: tuple[str, ...] = (
    "유한책임회사", "주식회사", "유한회사", "합자회사", "합명회사",
    "(유한)", "(합자)", "(합명)", "(주)", "㈜", "(유)",
)

_EN_SUFFIX_RES = tuple(
    re.compile(_WORD_BEFORE + suffix + _WORD_AFTER) for suffix in EN_COMPANY_SUFFIXES
)


def _is_significant(ch: str) -> bool:
    """영문/숫자/완성형 문자 여부 (자모 제외)"""
    return ch.isalnum() and not _JAMO_RE.match(ch)


def _prepare(s: str) -> str:
    # NFD로 들어온 한글(예: macOS 파일명)을 완성형으로 합침
    return unicodedata.normalize("NFC", s).strip().lower()


def normalize_text(s: Optional[str]) -> Optional[str]:
    """일반 텍스트 정규화 (제품명, 모델명 비교용)

    - 소문자화 + trim
    - 단독 자모(ㄱ-ㅎ, ㅏ-ㅣ) 제거
    - 다중 공백 → 1칸

    Args:
        s: 원본 문자열

    Returns:
        정규화 문자열, 비어 있으면 None
    """
    if s is None:
        return None

    t = _JAMO_RE.sub(" ", _prepare(s))
    t = _WHITESPACE_RE.sub(" ", t).strip()
    return t or None


def normalize_manufacturer(s: Optional[str]) -> Optional[str]:
    """제조사 정규화

    normalize_text 규칙에 더해 회사 형태(Inc, Ltd, 주식회사, ㈜ 등)를 단어 단위로 제거하고,
    하이픈 글리프를 통일한 뒤 문자/숫자/&/-/공백 이외의 문자는 공백으로 바꿉니다.

    예시:
    - "Shuyang Sunnybury Baby Products Co., Ltd" -> "shuyang sunnybury baby products"
    - "(주)한빛산업" -> "한빛산업"
    """
    if s is None:
        return None

    t = _JAMO_RE.sub(" ", _prepare(s))

    for form in KO_COMPANY_FORMS:
        t = t.replace(form, " ")

    for pattern in _EN_SUFFIX_RES:
        t = pattern.sub(" ", t)

    t = _DASH_RE.sub("-", t)
    t = "".join(
        ch if _is_significant(ch) or ch in "&-" or ch.isspace() else " "
        for ch in t
    )

    t = _WHITESPACE_RE.sub(" ", t).strip()
    return t or None


def is_weak_query(s: Optional[str]) -> bool:
    """약한 검색어 판정

    - None/빈 문자열
    - 공백과 자모만으로 이루어진 경우
    - 영문/숫자/완성형 문자만 남겼을 때 2글자 미만인 경우

    파이프라인에 들어오는 모든 사용자/AI 입력은 이 함수를 통과해야 합니다.
    """
    if s is None:
        return True

    t = unicodedata.normalize("NFC", s).strip()
    if not t:
        return True

    if _JAMO_ONLY_RE.match(t):
        return True

    significant = sum(1 for ch in t if _is_significant(ch))
    return significant < 2


def tokens_of(s: Optional[str], min_length: int = 2) -> list[str]:
    """공백 기준 토큰 중 min_length 이상인 것만 반환"""
    if not s:
        return []
    return [token for token in s.split() if len(token) >= min_length]
