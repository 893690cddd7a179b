"""Search Fields - 필드 종류별 정규화/가중치 테이블

제조사/제품명/모델명은 정규화 방식과 위험도 가중치만 다릅니다.
호출부에서 문자열로 분기하지 않고 이 테이블을 통해 디스패치합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from src.utils.text import is_weak_query, normalize_manufacturer, normalize_text


class SearchField(str, Enum):
    """검색 필드"""

    MANUFACTURER = "MANUFACTURER"
    PRODUCT = "PRODUCT"
    MODEL = "MODEL"


@dataclass(frozen=True)
class FieldSpec:
    normalizer: Callable[[Optional[str]], Optional[str]]
    weight: int
    # RecallProduct 컬럼 이름
    record_attr: str


FIELD_SPECS: dict[SearchField, FieldSpec] = {
    SearchField.MODEL: FieldSpec(normalizer=normalize_text, weight=40, record_attr="model_name"),
    SearchField.PRODUCT: FieldSpec(normalizer=normalize_text, weight=30, record_attr="product_name"),
    SearchField.MANUFACTURER: FieldSpec(normalizer=normalize_manufacturer, weight=20, record_attr="manufacturer"),
}


def normalize_for_field(value: Optional[str], field: SearchField) -> Optional[str]:
    """필드 성격에 맞는 정규화"""
    return FIELD_SPECS[field].normalizer(value)


def record_value(record, field: SearchField) -> Optional[str]:
    """레코드에서 필드에 해당하는 원본 값"""
    return getattr(record, FIELD_SPECS[field].record_attr, None)


def significant_value(value: Optional[str], field: SearchField) -> Optional[str]:
    """정규화 후 약한 검색어면 None (필드 미사용)"""
    normalized = normalize_for_field(value, field)
    if is_weak_query(normalized):
        return None
    return normalized
