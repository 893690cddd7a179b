"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class RecallMatcherException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 유효성 검증 관련 예외 (InvalidInput, 재시도 불가)
class ValidationException(RecallMatcherException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                         details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """검색에 사용할 수 있는 입력이 하나도 없음"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("query", reason, details)
        self.error_code = "INVALID_INPUT"


# 리콜 레코드 저장소 관련 예외 (StoreFailure, 재시도 가능)
class StoreException(RecallMatcherException):
    """저장소 관련 예외의 기본 클래스

    저장소 장애는 절대 "리콜 이력 없음"으로 해석하면 안 됩니다.
    """
    retryable = True

    def __init__(self, message: str, error_code: str = "STORE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "STORE_ERROR", details)


class StoreConnectionException(StoreException):
    """저장소 연결 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Record store connection failed: {reason}"
        super().__init__(message, "STORE_CONNECTION_ERROR", details or {"reason": reason})


class StoreQueryException(StoreException):
    """저장소 조회 실패"""
    def __init__(self, operation: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Record store query '{operation}' failed: {reason}"
        super().__init__(message, "STORE_QUERY_ERROR",
                         details or {"operation": operation, "reason": reason})


# 외부 기능(AI) 관련 예외 - 항상 로컬에서 복구
class ExternalCapabilityException(RecallMatcherException):
    """외부 기능 실패 (검색 품질 저하로만 처리)"""
    def __init__(self, message: str, error_code: str = "EXTERNAL_CAPABILITY_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "EXTERNAL_CAPABILITY_ERROR", details)


class VariantGenerationException(ExternalCapabilityException):
    """검색어 변형 생성 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Variant generation failed: {reason}"
        super().__init__(message, "VARIANT_GENERATION_ERROR", details or {"reason": reason})


class ImageAnalysisException(ExternalCapabilityException):
    """이미지 분석 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Image analysis failed: {reason}"
        super().__init__(message, "IMAGE_ANALYSIS_ERROR", details or {"reason": reason})


# 캐시 관련 예외
class CacheException(RecallMatcherException):
    """캐시 관련 예외"""
    def __init__(self, message: str, error_code: str = "CACHE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_ERROR", details)


class CacheConnectionException(CacheException):
    """캐시 연결 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to connect to cache: {reason}"
        super().__init__(message, "CACHE_CONNECTION_ERROR", details or {"reason": reason})


# 시간 관련 예외
class TimeoutException(RecallMatcherException):
    """타임아웃 예외"""
    def __init__(self, operation: str, timeout_s: float, details: Optional[dict[str, Any]] = None):
        message = f"Operation '{operation}' timed out after {timeout_s}s"
        super().__init__(message, "TIMEOUT",
                         details or {"operation": operation, "timeout_s": timeout_s})
