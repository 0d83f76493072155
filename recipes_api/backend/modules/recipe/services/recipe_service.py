import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId

from recipes_api.backend.modules.recipe.models.recipe_model import RecipeModel
from recipes_api.shared.modules.cache.cache_key_generator import CacheKeyGenerator
from recipes_api.shared.modules.cache.cache_store import CacheStore
from recipes_api.shared.modules.recipe.errors import DecodeError, NotFound
from recipes_api.shared.modules.recipe.models.recipe import (
    Recipe,
    RecipePayload,
    dump_recipes,
    load_recipes,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    # Mongo stores datetimes with millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class RecipeService:
    """
    Cache-aside access to the recipe collection.

    The full list is cached under a single key with no expiry. Reads populate
    it on a miss; every successful create, update and delete drops it so the
    next list repopulates from the store. Tag search always goes to the store.
    """

    def __init__(
        self,
        recipe_model: RecipeModel,
        cache: Optional[CacheStore] = None,
        key_generator: Optional[CacheKeyGenerator] = None,
        tag_search_case_insensitive: bool = False,
    ):
        self.recipe_model = recipe_model
        self.cache = cache
        self.keys = key_generator or CacheKeyGenerator()
        self.tag_search_case_insensitive = tag_search_case_insensitive

    def list_all(self) -> List[Recipe]:
        """
        Serve the recipe list from the cache, falling back to the store on a miss.

        A cache backend error propagates as StorageUnavailable; it is not
        treated as a miss. A corrupt cached entry is dropped and rebuilt.
        """
        if self.cache is None:
            return self.recipe_model.find_all()

        key = self.keys.list_all()
        cached = self.cache.get(key)
        if cached is not None:
            try:
                recipes = load_recipes(cached)
                logger.info("Request to Redis")
                return recipes
            except DecodeError as e:
                logger.warning(f"Discarding corrupt cache entry '{key}': {e}")
                self.cache.delete(key)

        logger.info("Request to MongoDB")
        recipes = self.recipe_model.find_all()
        self.cache.set(key, dump_recipes(recipes))
        return recipes

    def invalidate(self):
        """Drop the cached recipe list. Safe to call when nothing is cached."""
        if self.cache is None:
            return
        logger.info("Remove data from Redis")
        self.cache.delete(self.keys.list_all())

    def create(self, payload: RecipePayload) -> Recipe:
        recipe = Recipe(
            id=str(ObjectId()),
            name=payload.name,
            tags=payload.tags,
            ingredients=payload.ingredients,
            instructions=payload.instructions,
            published_at=_now(),
        )
        self.recipe_model.create(recipe)
        self.invalidate()
        return recipe

    def update(self, recipe_id: str, payload: RecipePayload):
        matched = self.recipe_model.update(recipe_id, **payload.update_fields())
        if matched == 0:
            raise NotFound(f"Recipe {recipe_id} not found")
        self.invalidate()

    def delete(self, recipe_id: str):
        deleted = self.recipe_model.delete(recipe_id)
        if deleted == 0:
            raise NotFound(f"Recipe {recipe_id} not found")
        self.invalidate()

    def search_by_tag(self, tag: str) -> List[Recipe]:
        return self.recipe_model.find_by_tag(tag, case_insensitive=self.tag_search_case_insensitive)

    def load(self, records: List[dict]) -> int:
        """
        Bulk-insert seed records, assigning ids and timestamps where missing.
        """
        recipes = []
        for record in records:
            payload = RecipePayload.from_json(record)
            recipe_id = record.get("id")
            if not (isinstance(recipe_id, str) and ObjectId.is_valid(recipe_id)):
                recipe_id = str(ObjectId())
            recipes.append(
                Recipe(
                    id=recipe_id,
                    name=payload.name,
                    tags=payload.tags,
                    ingredients=payload.ingredients,
                    instructions=payload.instructions,
                    published_at=record.get("publishedAt") or _now(),
                )
            )
        inserted = self.recipe_model.create_many(recipes)
        if inserted:
            self.invalidate()
        return inserted
