# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from constants import SPEECH_LOCALE_TABLE
from interpreter.locale_adapter import resolve_speech_locale


@pytest.mark.parametrize(
    "app_locale,expected",
    [
        ("en", "en-US"),
        ("hi", "hi-IN"),
        ("te", "te-IN"),
        ("zh", "zh-CN"),
        ("pt", "pt-BR"),
        ("sv", "sv-SE"),
    ],
)
def test_known_codes_map_to_speech_tags(app_locale: str, expected: str) -> None:
    assert resolve_speech_locale(app_locale) == expected


def test_every_table_entry_is_reachable() -> None:
    for code, tag in SPEECH_LOCALE_TABLE.items():
        assert resolve_speech_locale(code) == tag


def test_unknown_code_falls_back_to_default() -> None:
    assert resolve_speech_locale("xx") == "en-US"


def test_empty_and_missing_locale_fall_back_to_default() -> None:
    assert resolve_speech_locale("") == "en-US"
    assert resolve_speech_locale(None) == "en-US"


def test_lookup_is_case_insensitive() -> None:
    assert resolve_speech_locale("HI") == "hi-IN"


def test_regional_code_falls_back_to_base_language() -> None:
    assert resolve_speech_locale("hi-IN") == "hi-IN"
    assert resolve_speech_locale("pt_PT") == "pt-BR"
    assert resolve_speech_locale("xx-YY") == "en-US"


def test_custom_table_and_default() -> None:
    table = {"fr": "fr-CA"}
    assert resolve_speech_locale("fr", table=table, default="fr-FR") == "fr-CA"
    assert resolve_speech_locale("de", table=table, default="fr-FR") == "fr-FR"
