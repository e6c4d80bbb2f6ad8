"""
CONSTANTS
---------
Single source of truth for all behavioral constants of the interpreter.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Mapping

# =============================================================================
# Speech locales
# =============================================================================

DEFAULT_APP_LOCALE: Final[str] = "en"
DEFAULT_SPEECH_LOCALE: Final[str] = "en-US"

# Application locale code -> speech engine locale tag
SPEECH_LOCALE_TABLE: Final[Mapping[str, str]] = {
    "en": "en-US",
    "hi": "hi-IN",
    "te": "te-IN",
    "es": "es-ES",
    "fr": "fr-FR",
    "zh": "zh-CN",
    "ar": "ar-SA",
    "pt": "pt-BR",
    "de": "de-DE",
    "ja": "ja-JP",
    "ru": "ru-RU",
    "ko": "ko-KR",
    "it": "it-IT",
    "th": "th-TH",
    "vi": "vi-VN",
    "nl": "nl-NL",
    "tr": "tr-TR",
    "pl": "pl-PL",
    "id": "id-ID",
    "ms": "ms-MY",
    "uk": "uk-UA",
    "sv": "sv-SE",
}

# =============================================================================
# Navigation
# =============================================================================

SEARCH_PATH: Final[str] = "/shop"
SEARCH_QUERY_PARAM: Final[str] = "search"

# Path -> spoken/visible destination name
DESTINATION_LABELS: Final[Mapping[str, str]] = {
    "/": "home",
    "/shop": "shop",
    "/predict": "crop prediction",
    "/analytics": "analytics",
    "/cart": "cart",
    "/contact": "contact",
    "/orders": "orders",
    "/auth": "sign in",
    "/history": "prediction history",
}

# =============================================================================
# Session timing
# =============================================================================

ERROR_STATE_AUTO_RESOLVE_DELAY_MS: Final[int] = 100

# =============================================================================
# Observability
# =============================================================================

TRANSCRIPT_LOG_PREVIEW_CHARS: Final[int] = 80
PAYLOAD_LOG_PREVIEW_CHARS: Final[int] = 100
