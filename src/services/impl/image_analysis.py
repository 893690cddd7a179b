"""이미지 분석 서비스 (제품 사진 → 제품명/제조사/모델명)

이미지 분석 실패는 검색 실패가 아니며, 호출부는 텍스트 입력만으로 계속 진행합니다.
"""

from __future__ import annotations

import base64
from typing import Optional

from src.clients.openai_chat import ChatCompletionError, OpenAIChatClient
from src.core.config import settings
from src.core.exceptions import ImageAnalysisException
from src.core.logging import logger, sanitize_for_log


ANALYSIS_PROMPT = (
    "이 이미지는 소비자가 촬영한 제품 사진입니다. "
    "사진에서 제품명, 제조사, 모델명을 읽어 JSON 객체 하나만 출력하세요.\n"
    '형식: {"productName": "...", "manufacturer": "...", "modelName": "..."}\n'
    "읽을 수 없는 값은 빈 문자열로 두세요. 설명이나 코드블록은 출력하지 마세요."
)

DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageAnalysisService:
    """제품 사진 분석 서비스

    Usage:
        text = await service.analyze(image_bytes, "image/png")
        fields = parse_analysis_result(text)
    """

    def __init__(self, chat_client: Optional[OpenAIChatClient] = None, timeout_s: Optional[float] = None):
        self.chat_client = chat_client or OpenAIChatClient()
        self.timeout_s = timeout_s or settings.image_analysis_timeout_s

    @property
    def enabled(self) -> bool:
        return self.chat_client.enabled

    async def analyze(self, data: bytes, content_type: Optional[str] = None) -> Optional[str]:
        """이미지를 비전 모델로 보내고 응답 텍스트를 반환

        Raises:
            ImageAnalysisException: 비활성화, 호출 실패, 타임아웃
        """
        mime = content_type if content_type and content_type.startswith("image/") else DEFAULT_CONTENT_TYPE
        data_url = f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
        content = [
            {"type": "text", "text": ANALYSIS_PROMPT},
            {"type": "image_url", "image_url": {"url": data_url}},
        ]

        try:
            raw = await self.chat_client.complete(content, timeout_s=self.timeout_s)
        except ChatCompletionError as e:
            raise ImageAnalysisException(str(e)) from e

        logger.info(f"[Image] analysis result: {sanitize_for_log(raw, 300)}")
        return raw.strip() or None
