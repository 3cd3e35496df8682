from __future__ import annotations

from datetime import datetime
from typing import TypedDict

from bson import ObjectId

# Field names of a todo document as stored in the collection.
ID_FIELD = "_id"
TITLE_FIELD = "title"
COMPLETED_FIELD = "completed"
CREATED_AT_FIELD = "createdAt"


# PUBLIC_INTERFACE
class TodoDocument(TypedDict):
    """
    Persisted form of a Todo item in the document store.

    Fields:
    - _id: store-assigned ObjectId, unique and immutable
    - title: non-empty title (trimmed on input via schemas)
    - completed: completion flag, false on creation unless given
    - createdAt: UTC creation timestamp, never modified after insert
    """

    _id: ObjectId
    title: str
    completed: bool
    createdAt: datetime
