"""Risk Scorer - 결정적 다중 필드 위험도 점수

모델명 +40, 제품명 +30, 제조사 +20, 결함내용 존재 +10 (최대 100).
필드 일치: 정규화된 레코드 값이 정규화된 질의 전체를 포함하거나,
질의의 2글자 이상 토큰 중 하나를 포함하면 일치로 봅니다.
"""

from enum import Enum
from typing import Optional

from src.engine.fields import FIELD_SPECS, SearchField, normalize_for_field, record_value
from src.repositories.models import RecallProduct
from src.utils.text import is_weak_query, tokens_of


DEFECT_CONTENT_WEIGHT = 10
MAX_RISK_SCORE = 100


class RiskLevel(str, Enum):
    """위험도 등급"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]


_LEVEL_LABELS = {
    RiskLevel.HIGH: "높음",
    RiskLevel.MEDIUM: "보통",
    RiskLevel.LOW: "낮음",
    RiskLevel.NONE: "없음",
}


def field_matches(query: Optional[str], record_value: Optional[str], field: SearchField) -> bool:
    """정규화 후 전체 포함 또는 토큰 포함 여부"""
    q = normalize_for_field(query, field)
    r = normalize_for_field(record_value, field)
    # 빈 문자열 포함 매칭 방지
    if is_weak_query(q) or not r:
        return False
    if q in r:
        return True
    return any(token in r for token in tokens_of(q, min_length=2))


def calculate_risk_score(
    product_query: Optional[str],
    manufacturer_query: Optional[str],
    model_query: Optional[str],
    record: Optional[RecallProduct],
) -> int:
    """질의와 레코드의 위험도 점수 (0~100)"""
    if record is None:
        return 0

    queries = {
        SearchField.MODEL: model_query,
        SearchField.PRODUCT: product_query,
        SearchField.MANUFACTURER: manufacturer_query,
    }

    score = 0
    for field, spec in FIELD_SPECS.items():
        if field_matches(queries[field], record_value(record, field), field):
            score += spec.weight

    if record.defect_content and record.defect_content.strip():
        score += DEFECT_CONTENT_WEIGHT

    return min(score, MAX_RISK_SCORE)


def risk_level_from_score(score: int) -> RiskLevel:
    if score >= 70:
        return RiskLevel.HIGH
    if score >= 50:
        return RiskLevel.MEDIUM
    if score >= 1:
        return RiskLevel.LOW
    return RiskLevel.NONE
