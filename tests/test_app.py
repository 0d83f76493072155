import json
import logging

import pytest
from bson import ObjectId

from recipes_api.backend.app import create_app
from recipes_api.backend.config.settings import Settings
from recipes_api.backend.database.context import EXTENSION_KEY


def test_uri_without_database_fails_at_startup():
    settings = Settings(mongo_uri="mongodb://localhost:27017", cache_enabled=False)
    with pytest.raises(RuntimeError, match="MONGO_DATABASE"):
        create_app(settings)


def test_mongo_database_setting_selects_database():
    settings = Settings(
        mongo_uri="mongodb://localhost:27017", mongo_database="cookbook", cache_enabled=False
    )
    app = create_app(settings)
    assert app.extensions[EXTENSION_KEY].db.name == "cookbook"


def test_database_named_in_uri_is_used():
    settings = Settings(mongo_uri="mongodb://localhost:27017/pantry", cache_enabled=False)
    app = create_app(settings)
    assert app.extensions[EXTENSION_KEY].db.name == "pantry"


def _seed_file(tmp_path, content):
    path = tmp_path / "recipes.json"
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_load_recipes_command_inserts_and_reports(make_app, collection, tmp_path):
    path = _seed_file(tmp_path, json.dumps([{"name": "Tea"}, {"name": "Soup", "tags": ["dinner"]}]))

    result = make_app().test_cli_runner().invoke(args=["load-recipes", path])

    assert result.exit_code == 0
    assert "Inserted recipes: 2" in result.output
    assert [d["name"] for d in collection.docs] == ["Tea", "Soup"]


def test_load_recipes_command_rejects_invalid_json(make_app, collection, tmp_path):
    path = _seed_file(tmp_path, "[{not json")

    result = make_app().test_cli_runner().invoke(args=["load-recipes", path])

    assert result.exit_code == 1
    assert "is not valid JSON" in result.output
    assert "Traceback" not in result.output
    assert collection.docs == []


def test_load_recipes_command_reports_store_failure(make_app, collection, tmp_path):
    path = _seed_file(tmp_path, json.dumps([{"id": str(ObjectId()), "name": "Tea"}]))
    collection.fail = True

    result = make_app().test_cli_runner().invoke(args=["load-recipes", path])

    assert result.exit_code == 1
    assert "Error inserting into recipes" in result.output
    assert "Traceback" not in result.output


def test_load_recipes_command_rejects_invalid_record(make_app, tmp_path):
    path = _seed_file(tmp_path, json.dumps([{"tags": ["no name"]}]))

    result = make_app().test_cli_runner().invoke(args=["load-recipes", path])

    assert result.exit_code == 1
    assert "Error reading recipe" in result.output


def test_cache_reads_are_logged_by_the_service_module(client, caplog):
    caplog.set_level(logging.INFO, logger="recipes_api.backend.modules.recipe.services.recipe_service")

    client.get("/recipes")
    client.get("/recipes")

    messages = [
        r.getMessage()
        for r in caplog.records
        if r.name == "recipes_api.backend.modules.recipe.services.recipe_service"
    ]
    assert messages == ["Request to MongoDB", "Request to Redis"]
