"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 리콜 레코드 저장소
    database_url: str = "sqlite:///./recalls.db"

    # Redis (비어 있으면 프로세스 내 메모리 캐시 사용)
    redis_url: str = ""

    # 검색어 변형 캐시
    variant_cache_ttl: int = 600  # 10분
    variant_cache_max_size: int = 5000
    variant_limit: int = 10

    # 외부 AI (검색어 변형 / 이미지 분석)
    # NOTE: api key가 비어 있으면 외부 호출 없이 원본 검색어만 사용합니다.
    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.2
    variant_generator_timeout_s: float = 8.0
    image_analysis_timeout_s: float = 20.0

    # 업로드 이미지 최대 크기 (30MB)
    image_max_bytes: int = 30 * 1024 * 1024

    # 저장소 조회 (단계 검색 + 전체 스캔) 상한
    store_query_timeout_s: float = 15.0

    # FE 타임아웃보다 짧게 서버에서 하드 캡
    api_recall_search_timeout_s: float = 30.0

    # 사전 캐시 주기적 재구성 (0이면 비활성화)
    dictionary_refresh_interval_minutes: int = 0

    recall_detail_base_url: str = (
        "https://www.consumer.go.kr/user/ftc/consumer/recallInfo/1077/"
        "selectRecallInfoForeignDetail.do"
    )

    # API
    api_title: str = "리콜 제품 조회 서비스"
    api_version: str = "1.0.0"
    api_description: str = "사용자 입력(제품명/제조사/모델명)으로 리콜 이력을 찾고 위험도를 평가합니다."

    # 로깅
    environment: str = "development"
    log_level: str = "INFO"

    @field_validator("variant_cache_ttl", "variant_cache_max_size", "variant_limit")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("variant cache settings must be positive")
        return v

    @field_validator(
        "variant_generator_timeout_s",
        "image_analysis_timeout_s",
        "store_query_timeout_s",
        "api_recall_search_timeout_s",
    )
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("image_max_bytes")
    @classmethod
    def validate_image_max_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("image_max_bytes must be positive")
        return v

    @field_validator("dictionary_refresh_interval_minutes")
    @classmethod
    def validate_refresh_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("dictionary_refresh_interval_minutes must be >= 0")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v:
            raise ValueError("database_url must not be empty")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
