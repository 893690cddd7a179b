"""프로세스 공용 HTTP 세션 (curl_cffi)

AI 호출마다 세션을 새로 열면 TLS 핸드셰이크가 반복되므로 한 세션을 지연 생성해 공유하고,
앱 종료 시 shutdown_shared_http_client()로 닫습니다.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Tuple

from curl_cffi.requests import AsyncSession

from src.core.logging import logger

JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}

# 세션 타임아웃이 무시되는 경우에 대비한 코루틴 상한 여유분
_WAIT_SLACK_S = 1.0


class SharedHttpClient:
    def __init__(self, max_clients: int = 20) -> None:
        self._max_clients = max_clients
        self._session: Optional[AsyncSession] = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._session is not None

    async def _get_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is None:
                self._session = AsyncSession(
                    headers=dict(JSON_HEADERS),
                    max_clients=self._max_clients,
                    trust_env=False,
                )
            return self._session

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Tuple[int, str]]:
        """JSON 본문으로 POST 후 (status_code, body)를 돌려준다

        전송 오류와 타임아웃은 예외 대신 None (호출 측에서 실패로 해석)
        """
        session = await self._get_session()
        request = session.post(url, json=payload, headers=headers, timeout=timeout_s)
        try:
            resp = await asyncio.wait_for(request, timeout=timeout_s + _WAIT_SLACK_S)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"[HTTP] POST {url} failed: {type(e).__name__}: {e}")
            return None

        return int(getattr(resp, "status_code", 0) or 0), getattr(resp, "text", "") or ""

    async def close(self) -> None:
        async with self._lock:
            session, self._session = self._session, None
        if session is None:
            return
        try:
            await session.close()
        except Exception as e:
            logger.debug(f"[HTTP] session close failed: {type(e).__name__}: {e}")


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
