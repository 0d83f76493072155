"""
Base model class for MongoDB operations.
Thin pass-through over a single collection that maps driver failures to
StorageUnavailable and decodes documents into domain objects.
"""
import logging
from typing import Any, Dict, Iterable, List

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from recipes_api.shared.modules.recipe.errors import StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


class BaseNoSqlModel:
    """
    Base class for MongoDB models. Subclasses pick the collection and
    convert raw documents to model instances.
    """

    def __init__(self, db):
        self.db = db

    @property
    def collection(self):
        """
        Get the MongoDB collection for this model.
        Override in subclasses to specify collection name.
        """
        raise NotImplementedError("Subclasses must implement collection property")

    # -------------------------------------------------------------------------
    # Common CRUD operations
    # -------------------------------------------------------------------------

    @staticmethod
    def object_id(doc_id: str) -> ObjectId:
        """
        Parse a hex string into an ObjectId.
        A malformed id is a validation failure, never coerced to a zero id.
        """
        if not isinstance(doc_id, str) or not ObjectId.is_valid(doc_id):
            raise ValidationError(f"Invalid id: {doc_id!r}")
        return ObjectId(doc_id)

    def find_all(self) -> List[Any]:
        """Every document in the collection, in store iteration order."""
        return self.find_by_filter({})

    def find_by_filter(self, query: Dict[str, Any]) -> List[Any]:
        """
        Run a query and decode each document.
        Documents that fail to decode are logged and skipped.
        """
        try:
            with self.collection.find(query) as cursor:
                return self._decode_all(cursor)
        except PyMongoError as e:
            logger.error(f"Error searching {self.collection.name}: {e}")
            raise StorageUnavailable(f"Error searching {self.collection.name}") from e

    def create(self, model_instance: Any) -> Any:
        """Insert a new document built from a model instance."""
        doc = self._to_doc(model_instance)
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error inserting into {self.collection.name}: {e}")
            raise StorageUnavailable(f"Error inserting into {self.collection.name}") from e
        return model_instance

    def create_many(self, model_instances: Iterable[Any]) -> int:
        docs = [self._to_doc(m) for m in model_instances]
        if not docs:
            return 0
        try:
            result = self.collection.insert_many(docs)
        except PyMongoError as e:
            logger.error(f"Error inserting into {self.collection.name}: {e}")
            raise StorageUnavailable(f"Error inserting into {self.collection.name}") from e
        return len(result.inserted_ids)

    def update(self, doc_id: str, **fields) -> int:
        """
        Partially update a document by ID with $set.
        Returns the number of matched documents (0 or 1).
        """
        object_id = self.object_id(doc_id)
        try:
            result = self.collection.update_one({"_id": object_id}, {"$set": fields})
        except PyMongoError as e:
            logger.error(f"Error updating {self.collection.name}: {e}")
            raise StorageUnavailable(f"Error updating {self.collection.name}") from e
        return result.matched_count

    def delete(self, doc_id: str) -> int:
        """Delete a document by ID. Returns the number deleted (0 or 1)."""
        object_id = self.object_id(doc_id)
        try:
            result = self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error deleting from {self.collection.name}: {e}")
            raise StorageUnavailable(f"Error deleting from {self.collection.name}") from e
        return result.deleted_count

    def _decode_all(self, docs: Iterable[Dict[str, Any]]) -> List[Any]:
        decoded = []
        for doc in docs:
            try:
                decoded.append(self._from_doc(doc))
            except (PydanticValidationError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping undecodable document {doc.get('_id')!r}: {e}")
        return decoded

    def _from_doc(self, doc: Dict[str, Any]) -> Any:
        """
        Convert MongoDB document to model instance.
        Override in subclasses to provide proper model instantiation.
        """
        raise NotImplementedError("Subclasses must implement _from_doc method")

    def _to_doc(self, model_instance: Any) -> Dict[str, Any]:
        """Convert a model instance to a MongoDB document."""
        raise NotImplementedError("Subclasses must implement _to_doc method")
