"""단계 검색 테스트 (Fake 저장소 사용)"""
import threading
from unittest.mock import MagicMock

import pytest

from src.core.exceptions import StoreQueryException
from src.engine.candidate import SearchCandidate
from src.engine.staged_matcher import (
    STAGE_MANUFACTURER,
    STAGE_MODEL,
    STAGE_PRODUCT,
    STAGE_PRODUCT_MANUFACTURER_MODEL,
    StagedMatcher,
)


def test_stage_one_short_circuits(record_factory):
    first = record_factory("R-1", product_name="아기 침대")
    second = record_factory("R-2", product_name="아기 침대", manufacturer="Acme")
    store = MagicMock()
    store.find_by_product_contains.return_value = [first]
    store.find_by_product_and_manufacturer_contains.return_value = [second]

    hit = StagedMatcher(store).match(SearchCandidate("아기 침대", "acme", None))

    assert hit.record is first
    assert hit.stage == STAGE_PRODUCT
    store.find_by_product_and_manufacturer_contains.assert_not_called()


def test_takes_first_row_returned_by_store(record_factory):
    rows = [record_factory("R-9", product_name="침대"), record_factory("R-1", product_name="침대")]
    store = MagicMock()
    store.find_by_product_contains.return_value = rows

    hit = StagedMatcher(store).match(SearchCandidate("침대", None, None))

    assert hit.record.recall_sn == "R-9"


def test_product_stages_run_in_order(store_factory):
    store = store_factory([])

    assert StagedMatcher(store).match(SearchCandidate("침대", "acme", "mc676")) is None
    assert store.operations == ["product", "product+manufacturer", "product+manufacturer+model"]


def test_product_present_never_tries_manufacturer_only(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    hit = StagedMatcher(store).match(SearchCandidate("유아용침대", "sunnybury baby", None))

    assert hit is None
    assert "manufacturer" not in store.operations


def test_manufacturer_stage_when_product_absent(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    hit = StagedMatcher(store).match(SearchCandidate(None, "Sunnybury Baby", "zz999"))

    assert hit.record is sunnybury_record
    assert hit.stage == STAGE_MANUFACTURER
    assert store.calls == [("manufacturer", "sunnybury baby")]


def test_model_stage_only_when_product_and_manufacturer_absent(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    hit = StagedMatcher(store).match(SearchCandidate(None, None, "mc676"))

    assert hit.stage == STAGE_MODEL
    assert store.operations == ["model"]


def test_weak_fields_are_absent(store_factory, sunnybury_record):
    store = store_factory([sunnybury_record])

    hit = StagedMatcher(store).match(SearchCandidate("a", "ㄱ", "MC676"))

    assert hit.stage == STAGE_MODEL
    assert store.operations == ["model"]


def test_empty_candidate_issues_no_query(store_factory):
    store = store_factory([])

    assert StagedMatcher(store).match(SearchCandidate()) is None
    assert store.calls == []


def test_full_triple_stage(record_factory):
    record = record_factory("R-3", product_name="침대", manufacturer="Acme", model_name="X1")
    store = MagicMock()
    store.find_by_product_contains.return_value = []
    store.find_by_product_and_manufacturer_contains.return_value = []
    store.find_by_product_and_manufacturer_and_model_contains.return_value = [record]

    hit = StagedMatcher(store).match(SearchCandidate("침대", "acme", "x1"))

    assert hit.stage == STAGE_PRODUCT_MANUFACTURER_MODEL
    store.find_by_product_and_manufacturer_and_model_contains.assert_called_once_with("침대", "acme", "x1")


def test_store_error_propagates(store_factory):
    store = store_factory([], error=StoreQueryException("find_by_product_contains", "db down"))

    with pytest.raises(StoreQueryException):
        StagedMatcher(store).match(SearchCandidate("침대", None, None))


def test_match_any_returns_first_candidate_hit(store_factory, record_factory):
    acme = record_factory("R-1", manufacturer="Acme")
    beta = record_factory("R-2", manufacturer="Beta Corp")
    store = store_factory([acme, beta])
    candidates = [
        SearchCandidate(None, "gamma", None),
        SearchCandidate(None, "beta", None),
        SearchCandidate(None, "acme", None),
    ]

    hit = StagedMatcher(store).match_any(candidates)

    assert hit.record is beta
    assert hit.candidate == candidates[1]
    assert store.operations == ["manufacturer", "manufacturer"]


def test_match_any_stops_between_candidates_when_cancelled(store_factory, record_factory):
    cancel = threading.Event()

    class CancellingStore(store_factory):
        def find_by_manufacturer_contains(self, manufacturer):
            cancel.set()
            return super().find_by_manufacturer_contains(manufacturer)

    store = CancellingStore([record_factory("R-1", manufacturer="Beta Corp")])
    candidates = [SearchCandidate(None, "gamma", None), SearchCandidate(None, "beta", None)]

    assert StagedMatcher(store).match_any(candidates, cancel) is None
    assert store.operations == ["manufacturer"]
