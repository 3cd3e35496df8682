from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import StoreUnavailable
from .logging_config import get_logger
from .models import COMPLETED_FIELD, CREATED_AT_FIELD, ID_FIELD, TITLE_FIELD, TodoDocument
from .schemas import TodoOut

logger = get_logger(__name__)


def _to_document(raw: Mapping[str, Any]) -> TodoDocument:
    """
    Check a raw store document has the todo shape.

    Raises:
        StoreUnavailable: the document is missing a field or holds an ill-typed value.
    """
    try:
        doc_id = raw[ID_FIELD]
        title = raw[TITLE_FIELD]
        completed = raw.get(COMPLETED_FIELD, False)
        created_at = raw[CREATED_AT_FIELD]
    except KeyError as e:
        raise StoreUnavailable("failed to fetch todos", f"malformed todo document: missing {e.args[0]}") from e

    if not (
        isinstance(doc_id, ObjectId)
        and isinstance(title, str)
        and isinstance(completed, bool)
        and isinstance(created_at, datetime)
    ):
        raise StoreUnavailable("failed to fetch todos", f"malformed todo document {doc_id!r}")

    return {
        "_id": doc_id,
        "title": title,
        "completed": completed,
        "createdAt": created_at,
    }


# PUBLIC_INTERFACE
def to_out(doc: TodoDocument) -> TodoOut:
    """Map a persisted document to its wire form."""
    return TodoOut(
        id=str(doc["_id"]),
        title=doc["title"],
        completed=doc["completed"],
        created_at=doc["createdAt"],
    )


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Translates todo operations into single round trips against a collection.

    Nothing is cached; the collection is shared by all requests and must be
    safe for concurrent use (pymongo collections are).
    """

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def list(self) -> List[TodoDocument]:
        """Return every stored todo in store-native order."""
        try:
            raw_docs = list(self._collection.find({}))
        except PyMongoError as e:
            raise StoreUnavailable("failed to fetch todos", str(e)) from e
        return [_to_document(raw) for raw in raw_docs]

    def create(self, title: str, completed: bool = False) -> ObjectId:
        """
        Insert a new todo and return the id the store assigned.

        The title is expected to be validated by the caller.
        """
        document = {
            TITLE_FIELD: title,
            COMPLETED_FIELD: completed,
            CREATED_AT_FIELD: self._now(),
        }
        try:
            result = self._collection.insert_one(document)
        except PyMongoError as e:
            raise StoreUnavailable("database error", str(e)) from e
        logger.debug("Created todo %s", result.inserted_id)
        return result.inserted_id

    def update(self, todo_id: ObjectId, title: str, completed: bool) -> int:
        """
        Replace title and completed of the matching todo.

        Returns the modified count; 0 when nothing matched or nothing changed.
        """
        try:
            result = self._collection.update_one(
                {ID_FIELD: todo_id},
                {"$set": {TITLE_FIELD: title, COMPLETED_FIELD: completed}},
            )
        except PyMongoError as e:
            raise StoreUnavailable("database error", str(e)) from e
        return result.modified_count

    def delete(self, todo_id: ObjectId) -> int:
        """Remove the matching todo and return the deleted count (0 or 1)."""
        try:
            result = self._collection.delete_one({ID_FIELD: todo_id})
        except PyMongoError as e:
            raise StoreUnavailable("database error", str(e)) from e
        return result.deleted_count
