"""전체 스캔 폴백 테스트"""
import threading

import pytest

from src.core.exceptions import StoreQueryException
from src.engine.fallback_scanner import FallbackScanner


def test_manufacturer_containment_after_suffix_stripping(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    record = FallbackScanner(store).scan("유아용침대", "Sunnybury Baby Co., Ltd")

    assert record is sunnybury_record
    assert store.operations == ["all"]


def test_product_containment(store_factory, record_factory):
    record = record_factory("R-1", product_name="[리콜] 아기 침대 (원목)", manufacturer=None)
    store = store_factory([record_factory("R-0", product_name="유모차"), record])

    assert FallbackScanner(store).scan("아기 침대", None) is record


def test_ignores_model(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    assert FallbackScanner(store).scan("없는제품", "없는제조사") is None


def test_weak_query_is_no_constraint(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    assert FallbackScanner(store).scan("a", None) is None
    # 둘 다 조건이 없으면 저장소를 조회하지 않음
    assert store.calls == []


def test_record_with_null_fields_never_matches(store_factory, record_factory):
    store = store_factory([record_factory("R-1")])

    assert FallbackScanner(store).scan("침대", "acme") is None


def test_store_error_propagates(store_factory):
    store = store_factory([], error=StoreQueryException("find_all", "db down"))

    with pytest.raises(StoreQueryException):
        FallbackScanner(store).scan("침대", None)


def test_cancelled_scan_skips_full_scan(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])
    cancel = threading.Event()
    cancel.set()

    assert FallbackScanner(store).scan("아기 침대", "Sunnybury", cancel) is None
    assert store.calls == []
