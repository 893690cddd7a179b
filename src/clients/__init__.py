"""외부 HTTP 호출 클라이언트."""

from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .openai_chat import OpenAIChatClient, extract_message_content

__all__ = [
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "OpenAIChatClient",
    "extract_message_content",
]
