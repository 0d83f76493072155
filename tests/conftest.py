import re
from types import SimpleNamespace

import fakeredis
import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from recipes_api.backend.app import create_app
from recipes_api.backend.config.settings import Settings
from recipes_api.backend.database.context import RecipesContext
from recipes_api.backend.modules.recipe.models.recipe_model import RecipeModel
from recipes_api.backend.modules.recipe.services.recipe_service import RecipeService
from recipes_api.shared.modules.cache.redis_cache_store import RedisCacheStore


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def __iter__(self):
        return iter(self._docs)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _matches(doc, query):
    for field, expected in query.items():
        value = doc.get(field)
        if isinstance(expected, dict) and "$regex" in expected:
            flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
            pattern = re.compile(expected["$regex"], flags)
            values = value if isinstance(value, list) else [value]
            if not any(isinstance(v, str) and pattern.search(v) for v in values):
                return False
        elif isinstance(value, list) and not isinstance(expected, list):
            if expected not in value:
                return False
        elif value != expected:
            return False
    return True


class FakeCollection:
    """In-memory stand-in for a pymongo Collection, counting reads."""

    def __init__(self, name):
        self.name = name
        self.docs = []
        self.find_calls = 0
        self.fail = False

    def _check(self):
        if self.fail:
            raise ServerSelectionTimeoutError("mongo is down")

    def find(self, query):
        self._check()
        self.find_calls += 1
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)])

    def find_one(self, query):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                return dict(d)
        return None

    def insert_one(self, doc):
        self._check()
        if any(d["_id"] == doc["_id"] for d in self.docs):
            raise PyMongoError("duplicate key")
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def insert_many(self, docs):
        self._check()
        for doc in docs:
            self.docs.append(dict(doc))
        return SimpleNamespace(inserted_ids=[d["_id"] for d in docs])

    def update_one(self, query, update):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                d.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query):
        self._check()
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def collection(db, settings):
    return db[settings.mongo_collection]


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(redis_server):
    return fakeredis.FakeStrictRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def cache(redis_client):
    return RedisCacheStore(redis_client)


@pytest.fixture
def service(db, cache, settings):
    return RecipeService(RecipeModel(db, collection_name=settings.mongo_collection), cache=cache)


@pytest.fixture
def make_app(db, cache, settings):
    def _make(**overrides):
        app_settings = Settings(**{**settings.__dict__, **overrides})
        use_cache = cache if app_settings.cache_enabled else None
        return create_app(context=RecipesContext(settings=app_settings, db=db, cache=use_cache))

    return _make


@pytest.fixture
def client(make_app):
    return make_app().test_client()
