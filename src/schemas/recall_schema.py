"""Pydantic 스키마 정의"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.engine import RecallSearchResult
from src.utils.url_utils import build_recall_detail_url


class MatchedCandidate(BaseModel):
    """적중을 만든 검색 후보 (정규화 값)"""
    product_name: str | None = Field(None, description="제품명 변형")
    manufacturer: str | None = Field(None, description="제조사 변형")
    model_name: str | None = Field(None, description="모델명 변형")


class RecallData(BaseModel):
    """리콜 레코드 + 위험도"""
    recall_sn: str = Field(..., description="리콜번호")
    product_name: str | None = Field(None, description="제품명")
    business_name: str | None = Field(None, description="사업자명")
    manufacturer: str | None = Field(None, description="제조사")
    model_name: str | None = Field(None, description="모델명")
    publication_date: str | None = Field(None, description="리콜 공표일")
    defect_content: str | None = Field(None, description="결함내용")
    category: str | None = Field(None, description="카테고리")
    detail_url: str | None = Field(None, description="리콜 상세 페이지")

    risk_score: int = Field(..., ge=0, le=100, description="위험도 점수 (0~100)")
    risk_level: str = Field(..., description="high | medium | low | none")
    risk_label: str = Field(..., description="위험도 표시명")

    # Engine Layer 메타데이터
    stage: str | None = Field(None, description="적중 단계 (product ... model | fallback)")
    matched_candidate: MatchedCandidate | None = Field(None, description="적중 후보")


class RecallSearchResponse(BaseModel):
    """리콜 검색 응답"""
    status: str = Field(..., description="found | partial_match | no_match | invalid_input | store_failure | timeout")
    found: bool = Field(..., description="리콜 이력 존재 여부")
    data: Optional[RecallData] = Field(None, description="리콜 정보")
    message: str = Field(..., description="응답 메시지")
    error_code: str | None = Field(None, description="에러 코드")
    elapsed_ms: float = Field(0.0, ge=0, description="검색 소요 시간 (밀리초)")

    @classmethod
    def from_result(cls, result: RecallSearchResult) -> "RecallSearchResponse":
        data = None
        if result.record is not None:
            record = result.record
            candidate = result.candidate
            data = RecallData(
                recall_sn=record.recall_sn,
                product_name=record.product_name,
                business_name=record.business_name,
                manufacturer=record.manufacturer,
                model_name=record.model_name,
                publication_date=record.publication_date,
                defect_content=record.defect_content,
                category=record.category,
                detail_url=build_recall_detail_url(record.recall_sn),
                risk_score=result.risk_score,
                risk_level=result.risk_level.value,
                risk_label=result.risk_level.label,
                stage=result.stage,
                matched_candidate=MatchedCandidate(
                    product_name=candidate.product_name,
                    manufacturer=candidate.manufacturer,
                    model_name=candidate.model_name,
                ) if candidate is not None else None,
            )

        return cls(
            status=result.status.value,
            found=result.found,
            data=data,
            message=result.message or "",
            error_code=result.error_code,
            elapsed_ms=result.elapsed_ms or 0.0,
        )


class DictionaryStatsResponse(BaseModel):
    """사전 캐시 상태"""
    manufacturers: int = Field(..., ge=0, description="제조사 수")
    products: int = Field(..., ge=0, description="제품명 수")
    models: int = Field(..., ge=0, description="모델명 수")
    record_count: int = Field(..., ge=0, description="재구성 시점 레코드 수")
    built_at: datetime | None = Field(None, description="마지막 재구성 시각")
    refreshed: bool = Field(True, description="이번 요청에서 재구성 성공 여부")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    store: bool = Field(..., description="저장소 연결 여부")
    variant_cache: str = Field(..., description="memory | redis")
    dictionary_size: int = Field(..., ge=0, description="사전 항목 수 (전체 필드 합)")
