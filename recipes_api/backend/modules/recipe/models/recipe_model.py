import re
from typing import Any, Dict, List

from pymongo.collection import Collection

from recipes_api.backend.models.base_nosql_model import BaseNoSqlModel
from recipes_api.shared.modules.recipe.models.recipe import Recipe


class RecipeModel(BaseNoSqlModel):
    """
    MongoDB persistence wrapper for Recipe objects.
    Inherits common CRUD operations from BaseNoSqlModel.
    """

    def __init__(self, db, collection_name: str = "recipes"):
        super().__init__(db)
        self.collection_name = collection_name

    @property
    def collection(self) -> Collection:
        """Get the recipes collection from the database."""
        return self.db[self.collection_name]

    def find_by_tag(self, tag: str, case_insensitive: bool = False) -> List[Recipe]:
        """
        Recipes whose tags contain `tag`, either exactly or ignoring case.
        """
        if case_insensitive:
            query = {"tags": {"$regex": f"^{re.escape(tag)}$", "$options": "i"}}
        else:
            query = {"tags": tag}
        return self.find_by_filter(query)

    def _from_doc(self, doc: Dict[str, Any]) -> Recipe:
        """
        Convert MongoDB document to Recipe instance.
        """
        fields = dict(doc)
        fields["id"] = str(fields.pop("_id"))
        return Recipe.model_validate(fields)

    def _to_doc(self, recipe: Recipe) -> Dict[str, Any]:
        return {
            "_id": self.object_id(recipe.id),
            "name": recipe.name,
            "tags": list(recipe.tags),
            "ingredients": list(recipe.ingredients),
            "instructions": list(recipe.instructions),
            "publishedAt": recipe.published_at,
        }
