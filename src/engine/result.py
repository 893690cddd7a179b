"""Search Result - Standardized Result Format

Provides a standardized format for recall search results across all execution paths.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.engine.candidate import SearchCandidate
from src.engine.risk import RiskLevel
from src.repositories.models import RecallProduct


class SearchStatus(str, Enum):
    """검색 상태

    NO_MATCH(리콜 이력 없음)와 STORE_FAILURE(저장소 장애)는 절대 섞이면 안 됩니다.
    """

    FOUND = "found"  # 단계 검색 적중
    PARTIAL_MATCH = "partial_match"  # 전체 스캔 부분 일치
    NO_MATCH = "no_match"  # 결과 없음
    INVALID_INPUT = "invalid_input"  # 검색 가능한 입력 없음
    STORE_FAILURE = "store_failure"  # 저장소 장애 (재시도 가능)
    TIMEOUT = "timeout"  # 타임아웃


@dataclass
class RecallSearchResult:
    """리콜 검색 결과 표준 포맷

    Attributes:
        status: 검색 상태
        record: 적중 레코드
        risk_score: 위험도 점수 (0~100)
        risk_level: 위험도 등급
        candidate: 적중을 만든 후보 (전체 스캔이면 정규화된 원본 질의)
        stage: 적중 단계 ("product" ... "model" | "fallback")
        message: 사용자 표시용 메시지
        elapsed_ms: 소요 시간 (밀리초)
    """

    status: SearchStatus
    record: Optional[RecallProduct] = None
    risk_score: int = 0
    risk_level: RiskLevel = RiskLevel.NONE

    candidate: Optional[SearchCandidate] = None
    stage: Optional[str] = None
    message: Optional[str] = None
    elapsed_ms: Optional[float] = None

    # 디버깅 정보
    error_code: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status in (SearchStatus.FOUND, SearchStatus.PARTIAL_MATCH)

    @property
    def is_error(self) -> bool:
        return self.status in (
            SearchStatus.INVALID_INPUT,
            SearchStatus.STORE_FAILURE,
            SearchStatus.TIMEOUT,
        )

    @classmethod
    def matched(
        cls,
        record: RecallProduct,
        risk_score: int,
        risk_level: RiskLevel,
        candidate: SearchCandidate,
        stage: str,
        elapsed_ms: float,
        partial: bool = False,
    ) -> "RecallSearchResult":
        """적중 결과 생성 (partial=True면 전체 스캔 부분 일치)"""
        return cls(
            status=SearchStatus.PARTIAL_MATCH if partial else SearchStatus.FOUND,
            record=record,
            risk_score=risk_score,
            risk_level=risk_level,
            candidate=candidate,
            stage=stage,
            elapsed_ms=elapsed_ms,
            message="유사한 리콜 이력이 있습니다." if partial else "리콜 이력이 있습니다.",
        )

    @classmethod
    def no_match(cls, elapsed_ms: float) -> "RecallSearchResult":
        return cls(
            status=SearchStatus.NO_MATCH,
            elapsed_ms=elapsed_ms,
            message="리콜 이력이 없습니다.",
        )

    @classmethod
    def invalid_input(cls, reason: str, elapsed_ms: float = 0.0) -> "RecallSearchResult":
        return cls(
            status=SearchStatus.INVALID_INPUT,
            elapsed_ms=elapsed_ms,
            message=reason,
            error_code="INVALID_INPUT",
        )

    @classmethod
    def store_failure(cls, error_code: str, elapsed_ms: float) -> "RecallSearchResult":
        """저장소 장애 결과 생성

        Args:
            error_code: 원인 예외의 에러 코드
            elapsed_ms: 소요 시간 (밀리초)
        """
        return cls(
            status=SearchStatus.STORE_FAILURE,
            elapsed_ms=elapsed_ms,
            message="리콜 정보 저장소에 일시적으로 접근할 수 없습니다. 잠시 후 다시 시도해 주세요.",
            error_code=error_code,
        )

    @classmethod
    def timeout(cls, elapsed_ms: float) -> "RecallSearchResult":
        return cls(
            status=SearchStatus.TIMEOUT,
            elapsed_ms=elapsed_ms,
            message="검색 시간이 초과되었습니다. 잠시 후 다시 시도해 주세요.",
            error_code="TIMEOUT",
        )
