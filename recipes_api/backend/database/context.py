"""
Application context for the recipes backend.
Holds the shared store and cache handles, built once at startup and
attached to the Flask app instead of living in module globals.
"""
from dataclasses import dataclass
from typing import Any, Optional

from flask import current_app

from recipes_api.backend.config.settings import Settings
from recipes_api.shared.modules.cache.cache_store import CacheStore

EXTENSION_KEY = "recipes_api"


@dataclass
class RecipesContext:
    settings: Settings
    db: Any
    cache: Optional[CacheStore] = None


class DatabaseContext:
    """
    Access to the RecipesContext of the running Flask app.
    Works in both request context (controllers) and application context (CLI commands).
    """

    @staticmethod
    def init_app(app, context: RecipesContext):
        app.extensions[EXTENSION_KEY] = context

    @staticmethod
    def get() -> RecipesContext:
        return current_app.extensions[EXTENSION_KEY]
