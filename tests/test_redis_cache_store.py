import pytest

from recipes_api.shared.modules.cache.cache_key_generator import CacheKeyGenerator
from recipes_api.shared.modules.recipe.errors import StorageUnavailable


def test_get_returns_none_on_miss(cache):
    assert cache.get("recipes") is None


def test_set_without_ttl_never_expires(cache, redis_client):
    cache.set("recipes", "[]")
    assert cache.get("recipes") == "[]"
    assert redis_client.ttl("recipes") == -1


def test_set_with_ttl(cache, redis_client):
    cache.set("recipes", "[]", ttl_seconds=30)
    assert 0 < redis_client.ttl("recipes") <= 30


def test_delete_absent_key_is_noop(cache):
    cache.delete("recipes")
    cache.set("recipes", "[]")
    cache.delete("recipes")
    assert cache.get("recipes") is None


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.get("recipes"),
        lambda c: c.set("recipes", "[]"),
        lambda c: c.delete("recipes"),
    ],
)
def test_backend_errors_become_storage_unavailable(cache, redis_server, call):
    redis_server.connected = False
    with pytest.raises(StorageUnavailable):
        call(cache)


def test_ping(cache, redis_server):
    assert cache.ping() is True
    redis_server.connected = False
    assert cache.ping() is False


def test_key_generator():
    assert CacheKeyGenerator().list_all() == "recipes"
    assert CacheKeyGenerator("cookbook:v1").list_all() == "cookbook:v1:recipes"
