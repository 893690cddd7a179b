"""OpenAI Chat Completions 호출 래퍼 (검색어 변형 / 이미지 분석 공용)"""

from __future__ import annotations

import json
from typing import Any, Optional

from src.clients.http_client import SharedHttpClient, get_shared_http_client
from src.core.config import settings


class ChatCompletionError(Exception):
    """Chat Completions 호출 실패 (상태 코드/전송 오류/응답 형식)"""


def extract_message_content(body: str) -> str:
    """응답 본문에서 choices[0].message.content 추출

    Raises:
        ChatCompletionError: JSON이 아니거나 content가 없는 경우
    """
    try:
        root = json.loads(body)
        content = root["choices"][0]["message"]["content"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
        raise ChatCompletionError(f"unexpected response format: {type(e).__name__}") from e
    if not isinstance(content, str):
        raise ChatCompletionError("message content is not a string")
    return content


class OpenAIChatClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[SharedHttpClient] = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.api_url = api_url or settings.openai_api_url
        self.model = model or settings.openai_model
        self.http_client = http_client or get_shared_http_client()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        content: Any,
        *,
        timeout_s: float,
        temperature: Optional[float] = None,
    ) -> str:
        """단일 user 메시지로 호출하고 응답 텍스트를 반환

        Args:
            content: 메시지 content (문자열 또는 멀티모달 파트 리스트)
            timeout_s: 호출 타임아웃 (초)

        Raises:
            ChatCompletionError: 비활성화, 전송 실패, 200 이외 응답, 형식 오류
        """
        if not self.enabled:
            raise ChatCompletionError("api key is not configured")

        payload = {
            "model": self.model,
            "temperature": settings.openai_temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": content}],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        result = await self.http_client.post_json(
            self.api_url, payload, timeout_s=timeout_s, headers=headers
        )
        if result is None:
            raise ChatCompletionError("transport failure or timeout")

        status, body = result
        if status != 200:
            raise ChatCompletionError(f"status={status}")

        return extract_message_content(body)
