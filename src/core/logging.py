"""로깅 설정

- 루트가 아닌 "recall_matcher" 로거 하나에 stdout 핸들러를 붙입니다.
- 검색어/AI 응답 원문은 sanitize_for_log()를 거쳐 기록합니다.
"""
import logging
import re
import sys

from src.core.config import settings

LOGGER_NAME = "recall_matcher"

_FORMATS = {
    "production": "%(asctime)s [%(levelname)s] %(message)s",
    "development": "%(asctime)s [%(levelname)s] %(name)s %(funcName)s:%(lineno)d | %(message)s",
}
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 외부 라이브러리 로그가 검색 로그를 덮지 않도록
_NOISY_LOGGERS = ("apscheduler", "httpx")

_SECRET_PATTERNS = [
    (re.compile(r"sk-[A-Za-z0-9_\-]{4,}"), "sk-***"),
    (re.compile(r"(?i)bearer\s+\S+"), "Bearer ***"),
    (re.compile(r"(?i)\b(password|token|api_key|secret)\s*[=:]\s*\S+"), r"\1=***"),
]
_WHITESPACE_RE = re.compile(r"\s+")


def _resolve_level() -> int:
    level_name = settings.log_level.upper()
    # 운영에서는 DEBUG 불가
    if settings.is_production and level_name == "DEBUG":
        level_name = "INFO"
    return getattr(logging, level_name, logging.INFO)


def setup_logging() -> logging.Logger:
    app_logger = logging.getLogger(LOGGER_NAME)
    level = _resolve_level()
    app_logger.setLevel(level)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        fmt_key = "production" if settings.is_production else "development"
        handler.setFormatter(logging.Formatter(fmt=_FORMATS[fmt_key], datefmt=_DATE_FORMAT))
        app_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return app_logger


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """로그용 문자열 정리

    키/토큰 형태는 가리고, 줄바꿈을 한 칸 공백으로 접은 뒤 max_length로 자릅니다.
    빈 값은 "[empty]".
    """
    if not value:
        return "[empty]"

    result = value
    for pattern, mask in _SECRET_PATTERNS:
        result = pattern.sub(mask, result)
    result = _WHITESPACE_RE.sub(" ", result).strip()

    if len(result) > max_length:
        result = result[:max_length] + "..."
    return result
