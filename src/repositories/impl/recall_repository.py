"""리콜 레코드 리포지토리 - DB 접근 로직"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.database import SessionLocal
from src.core.exceptions import StoreQueryException
from src.core.logging import logger
from src.repositories.models import RecallProduct


def _contains_pattern(value: str) -> str:
    """LIKE 와일드카드를 이스케이프한 부분 포함 패턴"""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class RecallRepository:
    """리콜 레코드 데이터 액세스 레이어

    모든 조회는 대소문자를 무시한 부분 포함(ILIKE) 조건이며,
    결과는 recall_sn 순으로 정렬되어 "첫 번째 결과"가 항상 같습니다.
    """

    def __init__(self, db: Session):
        self.db = db

    def _find(self, operation: str, *conditions) -> List[RecallProduct]:
        try:
            return (
                self.db.query(RecallProduct)
                .filter(*conditions)
                .order_by(RecallProduct.recall_sn)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"[Store] {operation} failed: {type(e).__name__}: {e}")
            raise StoreQueryException(operation, str(e)) from e

    def find_by_product_contains(self, product_name: str) -> List[RecallProduct]:
        return self._find(
            "find_by_product_contains",
            RecallProduct.product_name.ilike(_contains_pattern(product_name), escape="\\"),
        )

    def find_by_manufacturer_contains(self, manufacturer: str) -> List[RecallProduct]:
        return self._find(
            "find_by_manufacturer_contains",
            RecallProduct.manufacturer.ilike(_contains_pattern(manufacturer), escape="\\"),
        )

    def find_by_model_contains(self, model_name: str) -> List[RecallProduct]:
        return self._find(
            "find_by_model_contains",
            RecallProduct.model_name.ilike(_contains_pattern(model_name), escape="\\"),
        )

    def find_by_product_and_manufacturer_contains(
        self, product_name: str, manufacturer: str
    ) -> List[RecallProduct]:
        return self._find(
            "find_by_product_and_manufacturer_contains",
            RecallProduct.product_name.ilike(_contains_pattern(product_name), escape="\\"),
            RecallProduct.manufacturer.ilike(_contains_pattern(manufacturer), escape="\\"),
        )

    def find_by_product_and_manufacturer_and_model_contains(
        self, product_name: str, manufacturer: str, model_name: str
    ) -> List[RecallProduct]:
        return self._find(
            "find_by_product_and_manufacturer_and_model_contains",
            RecallProduct.product_name.ilike(_contains_pattern(product_name), escape="\\"),
            RecallProduct.manufacturer.ilike(_contains_pattern(manufacturer), escape="\\"),
            RecallProduct.model_name.ilike(_contains_pattern(model_name), escape="\\"),
        )

    def find_all(self) -> List[RecallProduct]:
        """전체 조회 (사전 재구성/전체 스캔 폴백용)"""
        return self._find("find_all")

    def count(self) -> int:
        try:
            return self.db.query(func.count(RecallProduct.recall_sn)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"[Store] count failed: {type(e).__name__}: {e}")
            raise StoreQueryException("count", str(e)) from e


@contextmanager
def recall_store_scope(
    session_factory: Callable[[], Session] = SessionLocal,
) -> Iterator[RecallRepository]:
    """요청/작업 단위 저장소 스코프 (세션을 열고 반드시 닫음)"""
    db = session_factory()
    try:
        yield RecallRepository(db)
    finally:
        db.close()
