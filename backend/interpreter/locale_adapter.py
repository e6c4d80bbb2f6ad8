"""
Application locale -> speech engine locale tag.

Pure and stateless. Never fails: unmapped codes resolve to the default tag.
"""

from __future__ import annotations

from typing import Mapping

from constants import DEFAULT_SPEECH_LOCALE, SPEECH_LOCALE_TABLE


def resolve_speech_locale(
    app_locale: str | None,
    table: Mapping[str, str] = SPEECH_LOCALE_TABLE,
    default: str = DEFAULT_SPEECH_LOCALE,
) -> str:
    """
    Map an application locale code to a speech-recognition locale tag.

    Lookup order:
    1. The full code, case-insensitively ("hi" -> "hi-IN")
    2. The base language of a regional code ("pt_BR" -> "pt" -> "pt-BR")
    3. The default tag
    """
    if not app_locale:
        return default

    code = app_locale.strip().lower().replace("_", "-")
    if code in table:
        return table[code]

    base = code.split("-", 1)[0]
    return table.get(base, default)
