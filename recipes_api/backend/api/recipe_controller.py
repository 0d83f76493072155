import logging

from flask import Blueprint, jsonify, request

from recipes_api.backend.api.auth_controller import require_auth
from recipes_api.backend.factories.service_factory import ServiceFactory
from recipes_api.shared.modules.recipe.errors import (
    NotFound,
    RecipeError,
    StorageUnavailable,
    ValidationError,
)
from recipes_api.shared.modules.recipe.models.recipe import RecipePayload

logger = logging.getLogger(__name__)

bp = Blueprint("recipe_controller", __name__)


@bp.errorhandler(RecipeError)
def handle_recipe_error(e: RecipeError):
    if isinstance(e, ValidationError):
        return jsonify({"error": str(e)}), 400
    if isinstance(e, NotFound):
        return jsonify({"error": "Recipe not found"}), 404
    if isinstance(e, StorageUnavailable):
        logger.error(f"{request.method} {request.path} failed: {e}", exc_info=e)
        return jsonify({"error": f"Error {_action()} recipes"}), 500
    logger.error(f"Unexpected recipe error: {e}", exc_info=e)
    return jsonify({"error": "Internal error"}), 500


def _action() -> str:
    return {
        "GET": "searching",
        "POST": "inserting",
        "PUT": "updating",
        "DELETE": "deleting",
    }.get(request.method, "processing")


def _payload() -> RecipePayload:
    return RecipePayload.from_json(request.get_json(silent=True))


@bp.route("/recipes", methods=["GET"])
def list_recipes():
    """
    Return every recipe, served from the cache when it is warm.
    """
    recipes = ServiceFactory.create_recipe_service().list_all()
    return jsonify([r.to_json() for r in recipes]), 200


@bp.route("/recipes/search", methods=["GET"])
def search_recipes():
    """
    Return recipes carrying the given tag.

    GET /recipes/search?tag=dinner
    """
    tag = request.args.get("tag")
    if not tag:
        raise ValidationError("Missing 'tag' query parameter")
    recipes = ServiceFactory.create_recipe_service().search_by_tag(tag)
    return jsonify([r.to_json() for r in recipes]), 200


@bp.route("/recipes", methods=["POST"])
@require_auth
def create_recipe():
    """
    Create a new recipe. The server assigns id and publishedAt.

    body = {
        "name": "Tea",
        "tags": ["drink"],
        "ingredients": ["water", "leaves"],
        "instructions": ["boil", "steep"]
    }
    """
    recipe = ServiceFactory.create_recipe_service().create(_payload())
    return jsonify(recipe.to_json()), 200


@bp.route("/recipes/<recipe_id>", methods=["PUT"])
@require_auth
def update_recipe(recipe_id):
    """
    Replace name, tags, ingredients and instructions of an existing recipe.
    """
    payload = _payload()
    ServiceFactory.create_recipe_service().update(recipe_id, payload)
    return jsonify({"message": "Recipe has been updated"}), 200


@bp.route("/recipes/<recipe_id>", methods=["DELETE"])
@require_auth
def delete_recipe(recipe_id):
    ServiceFactory.create_recipe_service().delete(recipe_id)
    return jsonify({"message": "Recipe deleted"}), 202
