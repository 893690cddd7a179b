"""로그 문자열 정리 테스트"""
from src.core.logging import sanitize_for_log


def test_plain_query_is_untouched():
    assert sanitize_for_log("아기 침대 MC676") == "아기 침대 MC676"


def test_empty_value():
    assert sanitize_for_log("") == "[empty]"


def test_masks_api_key_and_bearer_token():
    assert sanitize_for_log("key sk-abcdef123456 used") == "key sk-*** used"
    assert sanitize_for_log("Authorization: Bearer abc.def") == "Authorization: Bearer ***"


def test_masks_secret_assignments():
    assert sanitize_for_log("password=hunter2 next") == "password=*** next"
    assert sanitize_for_log("api_key: abc") == "api_key=***"


def test_collapses_newlines():
    assert sanitize_for_log("a\nb\n\nc") == "a b c"


def test_truncates_long_values():
    result = sanitize_for_log("x" * 150, max_length=100)

    assert result == "x" * 100 + "..."
