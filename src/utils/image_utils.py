"""이미지 입력 유틸리티 (업로드 검증 + 비전 모델 응답 파싱)

비전 모델의 응답은 자유 텍스트일 수 있으므로 JSON → 라벨 패턴 → 휴리스틱 순으로 파싱합니다.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, replace
from typing import Optional

from src.core.config import settings


_LABEL_STOP = r"(?=\s*[,/|]?\s*(?:제품명|제조사|모델명)\s*[:：]|\n|$)"
_LABEL_PATTERNS = {
    "product_name": re.compile(r"제품명\s*[:：]\s*([^\n]+?)" + _LABEL_STOP),
    "manufacturer": re.compile(r"제조사\s*[:：]\s*([^\n]+?)" + _LABEL_STOP),
    "model_name": re.compile(r"모델명\s*[:：]\s*([^\n]+?)" + _LABEL_STOP),
}
_QUOTED_RE = re.compile(r"[\"'“”‘’]([^\"'“”‘’]{2,})[\"'“”‘’]")
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass(frozen=True)
class ExtractedFields:
    """이미지에서 읽어낸 필드 (없으면 None)"""

    product_name: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.product_name or self.manufacturer or self.model_name)


def _clean(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip().strip("\"'").strip()
    return value or None


def is_valid_image(
    data: Optional[bytes],
    content_type: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> bool:
    """업로드 이미지 유효성 (비어 있지 않음, 크기 상한, image/* 또는 octet-stream)"""
    if not data:
        return False
    limit = settings.image_max_bytes if max_bytes is None else max_bytes
    if len(data) > limit:
        return False
    if not content_type:
        return True
    content_type = content_type.lower()
    return content_type.startswith("image/") or content_type == "application/octet-stream"


def _parse_json_fields(text: str) -> Optional[ExtractedFields]:
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        obj = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(obj, dict):
        return None
    return ExtractedFields(
        product_name=_clean(obj.get("productName")),
        manufacturer=_clean(obj.get("manufacturer")),
        model_name=_clean(obj.get("modelName")),
    )


def _parse_labels(text: str) -> ExtractedFields:
    values = {}
    for key, pattern in _LABEL_PATTERNS.items():
        match = pattern.search(text)
        values[key] = _clean(match.group(1)) if match else None
    return ExtractedFields(**values)


def _guess_product_name(text: str) -> Optional[str]:
    quoted = _QUOTED_RE.search(text)
    if quoted:
        return _clean(quoted.group(1))
    for token in text.split():
        token = token.strip(".,:;()[]{}")
        if len(token) >= 3:
            return token
    return None


def parse_analysis_result(text: Optional[str]) -> ExtractedFields:
    """비전 모델 응답 텍스트 → ExtractedFields

    1) JSON 객체 (productName/manufacturer/modelName), 값이 하나라도 있으면 그대로 사용
    2) 아니면 "제품명:", "제조사:", "모델명:" 라벨
    3) 제품명이 여전히 없으면 첫 따옴표 문자열(2자 이상), 없으면 첫 3자 이상 토큰
    """
    if not text or not text.strip():
        return ExtractedFields()

    fields = _parse_json_fields(text)
    if fields is not None and not fields.is_empty:
        return fields

    fields = _parse_labels(text)

    if not fields.product_name:
        fields = replace(fields, product_name=_guess_product_name(text))

    return fields
