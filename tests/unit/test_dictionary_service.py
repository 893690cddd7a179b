"""리콜 사전 캐시 테스트"""
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from unittest.mock import patch

import pytest

from src.core.exceptions import StoreQueryException
from src.engine.fields import SearchField
from src.services.impl.dictionary_service import (
    Dictionary,
    RecallDictionaryService,
    build_dictionary,
)


@pytest.fixture
def records(record_factory):
    return [
        record_factory("R-1", product_name="Acme 유모차", manufacturer="Acme Inc.", model_name="AC-100"),
        record_factory("R-2", product_name="아기 침대", manufacturer="Shuyang Sunnybury Baby Products Co., Ltd", model_name="MC676"),
        record_factory("R-3", product_name="a", manufacturer=None, model_name="x"),
    ]


@pytest.fixture
def service(store_factory, records):
    svc = RecallDictionaryService(store_factory(records).scope)
    svc.refresh()
    return svc


class TestBuildDictionary:
    def test_normalizes_by_field(self, records):
        dictionary = build_dictionary(records)

        assert "acme" in dictionary.manufacturers
        assert "shuyang sunnybury baby products" in dictionary.manufacturers
        assert "acme 유모차" in dictionary.products
        assert "mc676" in dictionary.models
        assert dictionary.record_count == 3

    def test_skips_weak_values(self, records):
        dictionary = build_dictionary(records)

        assert "a" not in dictionary.products
        assert "x" not in dictionary.models

    def test_snapshot_is_immutable(self, records):
        dictionary = build_dictionary(records)

        assert isinstance(dictionary.products, frozenset)
        with pytest.raises(AttributeError):
            dictionary.products = frozenset()

    def test_entries_follow_field_table(self, records):
        dictionary = build_dictionary(records)

        assert dictionary.entries(SearchField.MANUFACTURER) is dictionary.manufacturers
        assert dictionary.entries(SearchField.PRODUCT) is dictionary.products
        assert dictionary.entries(SearchField.MODEL) is dictionary.models


class TestRefresh:
    def test_starts_empty(self, store_factory):
        svc = RecallDictionaryService(store_factory([]).scope)
        assert svc.snapshot == Dictionary.empty()

    def test_refresh_swaps_snapshot(self, store_factory, records, record_factory):
        store = store_factory(records)
        svc = RecallDictionaryService(store.scope)
        first = svc.refresh()

        store.records.append(record_factory("R-4", manufacturer="New Maker GmbH"))
        second = svc.refresh()

        assert svc.snapshot is second
        assert "new maker" in second.manufacturers
        # 이미 발행된 스냅샷은 변하지 않음
        assert "new maker" not in first.manufacturers

    def test_readers_see_old_snapshot_during_rebuild(self, store_factory, records, record_factory):
        entered = threading.Event()
        release = threading.Event()

        class BlockingStore(store_factory):
            blocking = False

            def find_all(self):
                rows = super().find_all()
                if self.blocking:
                    entered.set()
                    release.wait(5.0)
                return rows

        store = BlockingStore(records)
        svc = RecallDictionaryService(store.scope)
        svc.refresh()

        store.records.append(record_factory("R-4", manufacturer="New Maker GmbH"))
        store.blocking = True
        refresher = threading.Thread(target=svc.refresh)
        refresher.start()
        try:
            assert entered.wait(2.0)

            with ThreadPoolExecutor(max_workers=1) as pool:
                old_hit = pool.submit(svc.might_exist, "acme", SearchField.MANUFACTURER)
                new_hit = pool.submit(svc.might_exist, "new maker", SearchField.MANUFACTURER)
                filtered = pool.submit(
                    svc.filter_candidates, ["New Maker", "Acme"], SearchField.MANUFACTURER, 10
                )
                # 재구성이 막혀 있어도 읽기는 즉시 끝나고 이전 스냅샷으로 답함
                assert old_hit.result(timeout=1.0) is True
                assert new_hit.result(timeout=1.0) is False
                assert filtered.result(timeout=1.0) == ["acme"]
        finally:
            release.set()
            refresher.join(timeout=5.0)

        assert not refresher.is_alive()
        assert svc.might_exist("new maker", SearchField.MANUFACTURER) is True
        assert svc.filter_candidates(["New Maker"], SearchField.MANUFACTURER, 10) == ["new maker"]

    def test_failed_refresh_keeps_previous_snapshot(self, service):
        previous = service.snapshot

        @contextmanager
        def broken_scope():
            raise StoreQueryException("find_all", "connection reset")
            yield  # pragma: no cover

        service._store_scope = broken_scope

        with pytest.raises(StoreQueryException):
            service.refresh()
        assert service.snapshot is previous
        assert service.refresh_safely() is False
        assert service.snapshot is previous

    def test_stats(self, service):
        stats = service.stats()

        assert stats["manufacturers"] == 2
        assert stats["products"] == 2
        assert stats["models"] == 2
        assert stats["record_count"] == 3
        assert stats["built_at"] is not None


class TestFilterCandidates:
    def test_exact_tier_never_consults_fuzzy(self, service):
        with patch.object(
            RecallDictionaryService, "_contains_fuzzy", side_effect=AssertionError("fuzzy reached")
        ) as fuzzy:
            result = service.filter_candidates(["Acme"], SearchField.MANUFACTURER, 10)

        assert result == ["acme"]
        fuzzy.assert_not_called()

    def test_exact_matches_win_over_fuzzy(self, service):
        result = service.filter_candidates(
            ["sunnybury", "Acme Inc"], SearchField.MANUFACTURER, 10
        )
        assert result == ["acme"]

    def test_fuzzy_tier_when_no_exact(self, service):
        result = service.filter_candidates(
            ["Sunnybury Baby", "unknown maker"], SearchField.MANUFACTURER, 10
        )
        assert result == ["sunnybury baby"]

    def test_preserves_order_dedupes_and_caps(self, store_factory, record_factory):
        records = [record_factory(f"R-{i}", model_name=f"MC{i}00") for i in range(1, 6)]
        svc = RecallDictionaryService(store_factory(records).scope)
        svc.refresh()

        result = svc.filter_candidates(
            ["MC300", "mc300", "MC100", "MC500", "MC200"], SearchField.MODEL, 3
        )
        assert result == ["mc300", "mc100", "mc500"]

    def test_empty_when_nothing_plausible(self, service):
        assert service.filter_candidates(["전혀없는제품"], SearchField.PRODUCT, 10) == []

    @pytest.mark.parametrize("candidates", [None, [], [None, "", "  ", "a"]])
    def test_empty_or_weak_input(self, service, candidates):
        assert service.filter_candidates(candidates, SearchField.PRODUCT, 10) == []

    def test_zero_limit(self, service):
        assert service.filter_candidates(["Acme"], SearchField.MANUFACTURER, 0) == []


def test_might_exist(service):
    assert service.might_exist("ACME", SearchField.MANUFACTURER) is True
    assert service.might_exist("sunnybury", SearchField.MANUFACTURER) is True
    assert service.might_exist("mc", SearchField.MODEL) is True
    assert service.might_exist("a", SearchField.MODEL) is False
    assert service.might_exist("zzz", SearchField.PRODUCT) is False
