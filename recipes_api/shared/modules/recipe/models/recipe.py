from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from recipes_api.shared.modules.recipe.errors import DecodeError, ValidationError


class RecipePayload(BaseModel):
    """
    Inbound body for create/update.
    Client-supplied id and publishedAt are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    @classmethod
    def from_json(cls, data) -> "RecipePayload":
        if not isinstance(data, dict):
            raise ValidationError("Recipe body must be a JSON object")
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Error reading recipe: {e.errors()[0]['msg']}") from e

    def update_fields(self) -> dict:
        """The only fields an update is allowed to touch."""
        return {
            "name": self.name,
            "tags": self.tags,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
        }


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


_recipe_list = TypeAdapter(List[Recipe])


def dump_recipes(recipes: List[Recipe]) -> str:
    """Serialize a recipe list into the cached JSON array."""
    return _recipe_list.dump_json(recipes, by_alias=True).decode("utf-8")


def load_recipes(raw: str) -> List[Recipe]:
    """Deserialize a cached JSON array; raises DecodeError on corrupt data."""
    try:
        return _recipe_list.validate_json(raw)
    except PydanticValidationError as e:
        raise DecodeError(f"Corrupt cached recipe list: {e.error_count()} error(s)") from e
