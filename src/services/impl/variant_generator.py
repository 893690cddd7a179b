"""AI 검색어 변형 생성기 (외부 기능, 비결정적)

반환값은 신뢰할 수 없는 입력이므로 VariantFilter에서 반드시 정제/검증합니다.
"""

from __future__ import annotations

import json
from typing import Optional, Protocol

from src.clients.openai_chat import ChatCompletionError, OpenAIChatClient
from src.core.config import settings
from src.core.exceptions import VariantGenerationException
from src.core.logging import logger, sanitize_for_log
from src.engine.fields import SearchField
from src.utils.resource_loader import load_forbidden_prompt_keywords


class VariantGenerator(Protocol):
    """검색어 변형 생성기 인터페이스"""

    @property
    def enabled(self) -> bool:
        ...

    async def generate(self, query: str, field: Optional[SearchField]) -> list[str]:
        """
        Raises:
            VariantGenerationException: 호출 실패/타임아웃
        """
        ...


_FIELD_HINTS = {
    SearchField.MANUFACTURER: (
        "입력을 '제조사명'으로 간주하라. Inc, Ltd, 주식회사, ㈜ 등 회사형태 표기는 제거하고, "
        "띄어쓰기/대소문자/복수형/하이픈/약어 변형만 허용하라. "
    ),
    SearchField.MODEL: "입력을 '모델명'으로 간주하라. 공백/하이픈/대소문자 표기 변형만 허용하라. ",
    SearchField.PRODUCT: "입력을 '제품명'으로 간주하라. 공백/하이픈/대소문자/한영 표기 변형만 허용하라. ",
}
_DEFAULT_HINT = "입력을 DB에 존재할 수 있는 항목으로 간주하고, 공백/하이픈/대소문자/한영 표기 변형만 허용하라. "


def build_prompt(original_query: str, field: Optional[SearchField]) -> str:
    """필드별 힌트를 반영한 변형 프롬프트"""
    hint = _FIELD_HINTS.get(field, _DEFAULT_HINT)
    forbidden = ", ".join(load_forbidden_prompt_keywords())
    return (
        f"{hint}"
        "다음 검색어를 DB에 실제로 존재할 법한 형태로만 변형하여 '순수 JSON 배열'로 출력하라. "
        "조건: 1) 최대 10개, 2) 중복 제거, 3) 배열만 반환([ ] 포함). "
        f"다음 키워드는 절대 포함하지 말 것: {forbidden}. "
        f"코드블럭(```)이나 추가 설명 없이 배열만 출력: \"{original_query}\""
    )


def extract_json_array(content: Optional[str]) -> str:
    """코드펜스/설명 텍스트가 섞여 있어도 JSON 배열 부분만 추출

    배열을 찾지 못하면 원문(trim)을 그대로 반환합니다.
    """
    if content is None:
        return "[]"

    first = content.find("[")
    last = content.rfind("]")
    if first != -1 and last > first:
        return content[first:last + 1]

    return content.strip()


def safe_parse_json_array(text: Optional[str]) -> list[str]:
    """JSON 배열 파싱, 실패하면 단일 요소 리스트로 폴백

    LLM이 따옴표 누락/콤마 오류를 낼 때를 대비합니다.
    """
    try:
        parsed = json.loads(text or "")
        if isinstance(parsed, list):
            return [item for item in parsed if isinstance(item, str)]
        raise ValueError("not a JSON array")
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"[Variants] JSON parse failed, single-element fallback: {e}")
        trimmed = (text or "").strip()
        return [trimmed] if trimmed else []


class OpenAIVariantGenerator:
    """gpt 모델로 검색어 변형 후보를 생성"""

    def __init__(self, chat_client: Optional[OpenAIChatClient] = None, timeout_s: Optional[float] = None):
        self.chat_client = chat_client or OpenAIChatClient()
        self.timeout_s = timeout_s or settings.variant_generator_timeout_s

    @property
    def enabled(self) -> bool:
        return self.chat_client.enabled

    async def generate(self, query: str, field: Optional[SearchField]) -> list[str]:
        prompt = build_prompt(query, field)
        try:
            raw = await self.chat_client.complete(prompt, timeout_s=self.timeout_s)
        except ChatCompletionError as e:
            raise VariantGenerationException(str(e)) from e

        logger.info(f"[Variants] raw variants for '{sanitize_for_log(query)}': {sanitize_for_log(raw, 300)}")
        return safe_parse_json_array(extract_json_array(raw))
