"""resources/ 아래 YAML 로더"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

from src.core.logging import logger

# src/utils/resource_loader.py 기준 세 단계 위가 프로젝트 루트
RESOURCES_DIR = Path(__file__).resolve().parents[2] / "resources"
VARIANT_STOPLIST = "variants/stoplist.yaml"


def get_resource_path(relative_path: str) -> Path:
    return RESOURCES_DIR / relative_path


@lru_cache(maxsize=32)
def load_yaml_resource(relative_path: str) -> Dict[str, Any]:
    """YAML을 읽어 dict로 (없거나 깨진 파일은 빈 dict, 결과는 프로세스 동안 캐시)"""
    path = get_resource_path(relative_path)
    if not path.is_file():
        logger.warning(f"[Resource] missing: {path}")
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"[Resource] unreadable {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def load_invalid_variant_terms() -> frozenset[str]:
    """변형 결과에서 버릴 값 (소문자 비교용)"""
    terms = load_yaml_resource(VARIANT_STOPLIST).get("invalid_terms") or []
    return frozenset(str(term).strip().lower() for term in terms if term)


def load_forbidden_prompt_keywords() -> list[str]:
    terms = load_yaml_resource(VARIANT_STOPLIST).get("forbidden_keywords") or []
    return [str(term) for term in terms if term]
