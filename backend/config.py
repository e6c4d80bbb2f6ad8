"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No interpreter logic
- No behavioral constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import DEFAULT_APP_LOCALE


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the app factory and the session gateway.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = True

    # ------------------------------------------------------------------
    # Interpreter
    # ------------------------------------------------------------------

    default_app_locale: str = DEFAULT_APP_LOCALE
    catalog_path: str | None = None
    navigation_rules_path: str | None = None

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 8000

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if PORT is not an integer.
        """
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",

            default_app_locale=os.environ.get("DEFAULT_APP_LOCALE", DEFAULT_APP_LOCALE),
            catalog_path=os.environ.get("CATALOG_PATH") or None,
            navigation_rules_path=os.environ.get("NAVIGATION_RULES_PATH") or None,

            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "8000")),
        )
