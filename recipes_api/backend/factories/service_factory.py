"""
Service Factory for creating business service instances with proper dependencies.
"""
from typing import Optional

from recipes_api.backend.database.context import DatabaseContext, RecipesContext
from recipes_api.backend.modules.recipe.models.recipe_model import RecipeModel
from recipes_api.backend.modules.recipe.services.recipe_service import RecipeService
from recipes_api.shared.modules.cache.cache_key_generator import CacheKeyGenerator


class ServiceFactory:
    """
    Factory for creating service instances with injected dependencies.
    """

    @staticmethod
    def create_recipe_service(context: Optional[RecipesContext] = None) -> RecipeService:
        """
        Create a RecipeService wired to the app's store and cache.

        Args:
            context: Explicit context; defaults to the one on the current Flask app

        Returns:
            RecipeService: Configured recipe service
        """
        context = context or DatabaseContext.get()
        settings = context.settings
        recipe_model = RecipeModel(context.db, collection_name=settings.mongo_collection)
        return RecipeService(
            recipe_model,
            cache=context.cache,
            key_generator=CacheKeyGenerator(settings.cache_key_prefix),
            tag_search_case_insensitive=settings.tag_search_case_insensitive,
        )
