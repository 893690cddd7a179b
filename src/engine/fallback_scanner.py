"""Fallback Scanner - 전체 스캔 부분 일치 (최후 수단)

단계 검색이 모든 후보에서 실패했을 때만 호출됩니다.
정규화된 제조사 또는 제품명 포함 관계만 보고, 모델명은 보지 않습니다.
"""

import threading
from typing import Optional

from src.core.logging import logger
from src.engine.fields import SearchField, significant_value
from src.repositories.models import RecallProduct
from src.repositories.store import RecallStore


class FallbackScanner:
    def __init__(self, store: RecallStore):
        self.store = store

    def scan(
        self,
        product_name: Optional[str],
        manufacturer: Optional[str],
        cancel: Optional[threading.Event] = None,
    ) -> Optional[RecallProduct]:
        """전체 레코드를 한 번 순회하며 첫 번째 부분 일치를 반환

        약한 검색어는 "조건 없음"으로 취급하며, 두 축 모두 조건이 없으면
        저장소를 조회하지 않습니다. cancel이 이미 설정되어 있어도 조회하지 않습니다.
        """
        product_q = significant_value(product_name, SearchField.PRODUCT)
        manufacturer_q = significant_value(manufacturer, SearchField.MANUFACTURER)
        if not product_q and not manufacturer_q:
            return None

        if cancel is not None and cancel.is_set():
            logger.info("[Fallback] cancelled before full scan")
            return None

        records = self.store.find_all()
        for record in records:
            if manufacturer_q:
                record_manufacturer = significant_value(record.manufacturer, SearchField.MANUFACTURER)
                if record_manufacturer and manufacturer_q in record_manufacturer:
                    logger.info(f"[Fallback] manufacturer hit recall_sn={record.recall_sn}")
                    return record

            if product_q:
                record_product = significant_value(record.product_name, SearchField.PRODUCT)
                if record_product and product_q in record_product:
                    logger.info(f"[Fallback] product hit recall_sn={record.recall_sn}")
                    return record

        logger.info(f"[Fallback] no partial match in {len(records)} records")
        return None
