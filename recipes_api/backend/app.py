import json
import logging
from typing import Optional

import click
from flask import Flask
from flask_pymongo import PyMongo

from recipes_api.backend.config.settings import Settings
from recipes_api.backend.database.context import DatabaseContext, RecipesContext
from recipes_api.shared.modules.cache.redis_cache_store import RedisCacheStore
from recipes_api.shared.modules.log.logger import configure_logging
from recipes_api.shared.modules.recipe.errors import StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


def build_context(app: Flask, settings: Settings) -> RecipesContext:
    """
    Connect to MongoDB (and Redis when caching is enabled).
    Every call to either backend is bounded by the configured timeouts.
    """
    mongo = PyMongo(
        app,
        uri=settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        socketTimeoutMS=settings.mongo_timeout_ms,
        tz_aware=True,
    )
    db = mongo.cx[settings.mongo_database] if settings.mongo_database else mongo.db
    if db is None:
        raise RuntimeError("No database selected: set MONGO_DATABASE or name one in MONGO_URI")
    logger.info(f"Connected to MongoDB at {settings.mongo_uri}, database '{db.name}'")

    cache = RedisCacheStore.from_settings(settings) if settings.cache_enabled else None
    if cache is None:
        logger.info("Recipe cache disabled")
    elif not cache.ping():
        logger.warning("Redis is not reachable yet; list requests will fail until it is")
    return RecipesContext(settings=settings, db=db, cache=cache)


def create_app(settings: Optional[Settings] = None, context: Optional[RecipesContext] = None) -> Flask:
    """
    Build the Flask app. Tests pass a prebuilt context to skip real backends.
    """
    settings = settings or (context.settings if context else Settings.from_env())
    configure_logging(settings.log_level)

    app = Flask(__name__)
    DatabaseContext.init_app(app, context or build_context(app, settings))

    # Import and register blueprints after the context is attached
    from recipes_api.backend.api.auth_controller import bp as auth_controller_bp
    from recipes_api.backend.api.recipe_controller import bp as recipe_controller_bp

    app.register_blueprint(recipe_controller_bp)
    app.register_blueprint(auth_controller_bp)

    @app.cli.command("load-recipes")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def load_recipes_command(path):
        """Bulk-insert recipes from a JSON array file."""
        from recipes_api.backend.factories.service_factory import ServiceFactory

        with open(path, encoding="utf-8") as f:
            try:
                records = json.load(f)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"{path} is not valid JSON: {e}") from e
        if not isinstance(records, list):
            raise click.ClickException("Expected a JSON array of recipes")
        try:
            inserted = ServiceFactory.create_recipe_service().load(records)
        except (ValidationError, StorageUnavailable) as e:
            raise click.ClickException(str(e)) from e
        logger.info(f"Inserted recipes: {inserted}")
        click.echo(f"Inserted recipes: {inserted}")

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080, debug=False)
