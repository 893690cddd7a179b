"""데이터베이스 연결 및 세션 관리"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from src.core.config import settings
from src.core.logging import logger

# SQLAlchemy Base
Base = declarative_base()


def _engine_kwargs(url: str, statement_timeout_s: float) -> dict:
    # SQLite는 커넥션 풀 옵션을 받지 않음, timeout은 잠금 대기 상한
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": statement_timeout_s}}

    kwargs = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 5,
        "max_overflow": 10,
    }
    if url.startswith("postgresql"):
        # 서버 쪽에서 느린 쿼리를 끊는다 (ms 단위)
        timeout_ms = max(1, int(statement_timeout_s * 1000))
        kwargs["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
    return kwargs


engine = create_engine(
    settings.database_url,
    **_engine_kwargs(settings.database_url, settings.store_query_timeout_s),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """데이터베이스 테이블 초기화"""
    # 모델 등록 (metadata에 테이블을 올리기 위해 import)
    from src.repositories import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
