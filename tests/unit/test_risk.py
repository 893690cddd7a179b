"""위험도 점수 테스트"""
import pytest

from src.engine.risk import RiskLevel, calculate_risk_score, field_matches, risk_level_from_score
from src.engine.fields import SearchField


def test_end_to_end_weights(sunnybury_record):
    score = calculate_risk_score("유아용침대", "Sunnybury Baby", "MC676", sunnybury_record)

    # 모델 40 + 제조사 20 + 결함내용 10
    assert score == 70
    assert risk_level_from_score(score) == RiskLevel.HIGH


def test_without_defect_content(record_factory):
    record = record_factory(
        "R-1", manufacturer="Shuyang Sunnybury Baby Products Co., Ltd", model_name="MC676"
    )

    score = calculate_risk_score("유아용침대", "Sunnybury Baby", "MC676", record)

    assert score == 60
    assert risk_level_from_score(score) == RiskLevel.MEDIUM


def test_all_fields_match_is_clamped(record_factory):
    record = record_factory(
        "R-1", product_name="아기 침대", manufacturer="Acme Inc.", model_name="X-100", defect_content="결함"
    )

    assert calculate_risk_score("아기 침대", "ACME", "x-100", record) == 100


def test_token_level_match(record_factory):
    record = record_factory("R-1", product_name="원목 아기 침대")

    # 전체 문자열은 포함되지 않지만 "침대" 토큰이 포함됨
    assert calculate_risk_score("침대 프레임", None, None, record) == 30


def test_single_char_tokens_do_not_match(record_factory):
    record = record_factory("R-1", model_name="A100")

    assert not field_matches("b x 9", "A100", SearchField.MODEL)
    assert calculate_risk_score(None, None, "b x 9", record) == 0


def test_null_record_fields_score_zero(record_factory):
    record = record_factory("R-1")

    assert calculate_risk_score("침대", "acme", "x1", record) == 0
    assert calculate_risk_score(None, None, None, None) == 0


def test_blank_defect_content_adds_nothing(record_factory):
    assert calculate_risk_score(None, None, None, record_factory("R-1", defect_content="   ")) == 0
    assert calculate_risk_score(None, None, None, record_factory("R-1", defect_content="과열")) == 10


def test_adding_a_true_match_never_decreases_score(sunnybury_record):
    base = calculate_risk_score(None, None, None, sunnybury_record)
    with_model = calculate_risk_score(None, None, "MC676", sunnybury_record)
    with_both = calculate_risk_score(None, "Sunnybury", "MC676", sunnybury_record)

    assert base <= with_model <= with_both <= 100


@pytest.mark.parametrize(
    "score, level",
    [
        (100, RiskLevel.HIGH),
        (70, RiskLevel.HIGH),
        (69, RiskLevel.MEDIUM),
        (50, RiskLevel.MEDIUM),
        (49, RiskLevel.LOW),
        (1, RiskLevel.LOW),
        (0, RiskLevel.NONE),
    ],
)
def test_level_thresholds(score, level):
    assert risk_level_from_score(score) == level


def test_level_labels():
    assert RiskLevel.HIGH.label == "높음"
    assert RiskLevel.NONE.label == "없음"
