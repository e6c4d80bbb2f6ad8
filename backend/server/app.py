"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware
- Initialize shared resources (product catalog, navigation rules)
- Register routes
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppConfig
from interpreter.collaborators import ProductCatalog
from interpreter.rules import NAVIGATION_RULES, Rule, load_rules
from observability import logger
from services.catalog_service import InMemoryCatalog

from server.routes import register_routes


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This is the app factory pattern that allows:
    - Testing with different configurations
    - Environment-specific setup
    - ASGI server compatibility

    Raises:
        CatalogLookupError if CATALOG_PATH points at an unreadable file.
        ValueError / OSError if NAVIGATION_RULES_PATH is unreadable.
    """
    config = config or AppConfig.load_from_env()
    logger.configure(enabled=config.enable_json_logs)

    app = FastAPI(title="Voice Command Interpreter")

    app.state.config = config
    app.state.catalog = build_catalog(config)
    app.state.navigation_rules = build_navigation_rules(config)

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten per deployment
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app


def build_catalog(config: AppConfig) -> ProductCatalog:
    """Demo catalog unless a JSON seed file is configured."""
    if config.catalog_path:
        return InMemoryCatalog.from_json_file(config.catalog_path)
    return InMemoryCatalog()


def build_navigation_rules(config: AppConfig) -> tuple[Rule, ...]:
    if config.navigation_rules_path:
        return load_rules(config.navigation_rules_path)
    return NAVIGATION_RULES
