"""전역 테스트 설정

역할:
- 테스트 환경 구성 (외부 AI/Redis 비활성화, 메모리 SQLite)
- 공통 Fake 저장소 / 레코드 팩토리 주입

금지:
- 실제 외부 호출 (HTTP/Redis/OpenAI)
- 실제 리콜 데이터 대량 적재
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# settings는 import 시점에 만들어지므로 src import 전에 설정
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "INFO"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["DICTIONARY_REFRESH_INTERVAL_MINUTES"] = "0"

from src.repositories.models import RecallProduct  # noqa: E402


def make_record(
    recall_sn: str = "R-0001",
    product_name: Optional[str] = None,
    manufacturer: Optional[str] = None,
    model_name: Optional[str] = None,
    defect_content: Optional[str] = None,
    **extra,
) -> RecallProduct:
    """세션에 붙지 않은 RecallProduct 생성"""
    return RecallProduct(
        recall_sn=recall_sn,
        product_name=product_name,
        manufacturer=manufacturer,
        model_name=model_name,
        defect_content=defect_content,
        **extra,
    )


class FakeRecallStore:
    """메모리 리콜 저장소

    - 대소문자 무시 부분 포함 조회 (DB ILIKE와 동일 의미)
    - 호출 이력을 calls에 기록
    - error가 있으면 모든 조회에서 예외
    """

    def __init__(self, records: Optional[list[RecallProduct]] = None, error: Optional[Exception] = None):
        self.records = list(records or [])
        self.error = error
        self.calls: list[tuple] = []

    @staticmethod
    def _contains(value: Optional[str], needle: str) -> bool:
        return value is not None and needle.lower() in value.lower()

    def _find(self, operation: str, args: tuple, predicate) -> list[RecallProduct]:
        self.calls.append((operation, *args))
        if self.error:
            raise self.error
        return [r for r in self.records if predicate(r)]

    def find_by_product_contains(self, product_name: str) -> list[RecallProduct]:
        return self._find(
            "product", (product_name,),
            lambda r: self._contains(r.product_name, product_name),
        )

    def find_by_manufacturer_contains(self, manufacturer: str) -> list[RecallProduct]:
        return self._find(
            "manufacturer", (manufacturer,),
            lambda r: self._contains(r.manufacturer, manufacturer),
        )

    def find_by_model_contains(self, model_name: str) -> list[RecallProduct]:
        return self._find(
            "model", (model_name,),
            lambda r: self._contains(r.model_name, model_name),
        )

    def find_by_product_and_manufacturer_contains(
        self, product_name: str, manufacturer: str
    ) -> list[RecallProduct]:
        return self._find(
            "product+manufacturer", (product_name, manufacturer),
            lambda r: self._contains(r.product_name, product_name)
            and self._contains(r.manufacturer, manufacturer),
        )

    def find_by_product_and_manufacturer_and_model_contains(
        self, product_name: str, manufacturer: str, model_name: str
    ) -> list[RecallProduct]:
        return self._find(
            "product+manufacturer+model", (product_name, manufacturer, model_name),
            lambda r: self._contains(r.product_name, product_name)
            and self._contains(r.manufacturer, manufacturer)
            and self._contains(r.model_name, model_name),
        )

    def find_all(self) -> list[RecallProduct]:
        return self._find("all", (), lambda r: True)

    @contextmanager
    def scope(self) -> Iterator["FakeRecallStore"]:
        """recall_store_scope 대체"""
        yield self

    @property
    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeVariantGenerator:
    """고정 응답 변형 생성기"""

    def __init__(self, responses: Optional[dict] = None, error: Optional[Exception] = None, enabled: bool = True):
        self.responses = responses or {}
        self.error = error
        self._enabled = enabled
        self.calls: list[tuple] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def generate(self, query, field):
        self.calls.append((query, field))
        if self.error:
            raise self.error
        return list(self.responses.get(query, []))


@pytest.fixture
def sunnybury_record() -> RecallProduct:
    """대표 리콜 레코드 (제조사 회사형태 표기 포함)"""
    return make_record(
        recall_sn="R-2024-0001",
        product_name="아기 침대",
        manufacturer="Shuyang Sunnybury Baby Products Co., Ltd",
        model_name="MC676",
        defect_content="난간 간격이 넓어 영아 끼임 위험",
    )


@pytest.fixture
def fake_store(sunnybury_record) -> FakeRecallStore:
    return FakeRecallStore([sunnybury_record])


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def store_factory():
    return FakeRecallStore


@pytest.fixture
def generator_factory():
    return FakeVariantGenerator
