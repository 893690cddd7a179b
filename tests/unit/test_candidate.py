"""후보 조합 테스트"""
from src.engine.candidate import SearchCandidate, compose_candidates


def test_cross_product_order():
    candidates = compose_candidates(["p1", "p2"], ["m1"], ["n1", "n2"])

    assert candidates == [
        SearchCandidate("p1", "m1", "n1"),
        SearchCandidate("p1", "m1", "n2"),
        SearchCandidate("p2", "m1", "n1"),
        SearchCandidate("p2", "m1", "n2"),
    ]


def test_empty_list_becomes_absent_placeholder():
    candidates = compose_candidates([], ["m1", "m2"], [])

    assert candidates == [
        SearchCandidate(None, "m1", None),
        SearchCandidate(None, "m2", None),
    ]


def test_all_empty_yields_single_empty_candidate():
    candidates = compose_candidates([], [], [])

    assert len(candidates) == 1
    assert candidates[0].is_empty
