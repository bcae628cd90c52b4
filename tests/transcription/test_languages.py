"""
Unit Tests: language codes

**Test Coverage:**
- Primary subtag extraction and auto-detection hints
- BCP-47 expansion for locale-based services
- Supported language lookup
"""

import pytest

from audiodiary.transcription.languages import (
    SUPPORTED_LANGUAGES,
    get_language,
    is_supported,
    primary_subtag,
    to_bcp47,
)


@pytest.mark.parametrize("value,expected", [
    ("lv-LV", "lv"),
    ("LV", "lv"),
    ("en_US", "en"),
    ("auto", None),
    ("", None),
    (None, None),
])
def test_primary_subtag(value, expected):
    assert primary_subtag(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("lv", "lv-LV"),
    ("en", "en-US"),
    ("de_at", "de-AT"),
    ("lv-lv", "lv-LV"),
    (None, "lv-LV"),
    ("auto", "lv-LV"),
    ("xx", "lv-LV"),
])
def test_to_bcp47(value, expected):
    assert to_bcp47(value) == expected


def test_to_bcp47_custom_default():
    assert to_bcp47(None, default="en-GB") == "en-GB"


def test_supported_languages():
    assert SUPPORTED_LANGUAGES[0].code == "lv"
    assert is_supported("lv-LV")
    assert not is_supported("xx")
    assert get_language("ru").google_code == "ru-RU"
