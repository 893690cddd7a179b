"""리콜 레코드 저장소 인터페이스

매칭 엔진은 필드별 대소문자 무시 부분 포함 조회와 전체 조회만 사용합니다.
"""

from typing import Protocol, Sequence

from src.repositories.models import RecallProduct


class RecallStore(Protocol):
    """리콜 레코드 저장소 프로토콜

    모든 조회는 실패 시 StoreException 계열 예외를 던져야 합니다.
    빈 리스트는 "결과 없음"만을 의미합니다.
    """

    def find_by_product_contains(self, product_name: str) -> Sequence[RecallProduct]:
        ...

    def find_by_manufacturer_contains(self, manufacturer: str) -> Sequence[RecallProduct]:
        ...

    def find_by_model_contains(self, model_name: str) -> Sequence[RecallProduct]:
        ...

    def find_by_product_and_manufacturer_contains(
        self, product_name: str, manufacturer: str
    ) -> Sequence[RecallProduct]:
        ...

    def find_by_product_and_manufacturer_and_model_contains(
        self, product_name: str, manufacturer: str, model_name: str
    ) -> Sequence[RecallProduct]:
        ...

    def find_all(self) -> Sequence[RecallProduct]:
        ...
