"""Candidate Composer - 변형 리스트의 교차곱

필터를 통과한 제품명/제조사/모델명 변형으로 (제품명, 제조사, 모델명) 후보를 만듭니다.
필터링은 하지 않고 순수 조합만 수행합니다.
"""

from dataclasses import dataclass
from itertools import product
from typing import Optional, Sequence


@dataclass(frozen=True)
class SearchCandidate:
    """검색 후보 한 건 (None = 해당 필드 미사용)"""

    product_name: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.product_name or self.manufacturer or self.model_name)


def compose_candidates(
    products: Sequence[str],
    manufacturers: Sequence[str],
    models: Sequence[str],
) -> list[SearchCandidate]:
    """제품명 × 제조사 × 모델명 교차곱

    빈 리스트는 [None]으로 대체해 한 필드가 비어도 후보가 사라지지 않게 합니다.
    순서: 바깥 루프 제품명, 중간 제조사, 안쪽 모델명 (각 리스트 순서 유지).
    """
    return [
        SearchCandidate(product_name=p, manufacturer=m, model_name=n)
        for p, m, n in product(
            list(products) or [None],
            list(manufacturers) or [None],
            list(models) or [None],
        )
    ]
