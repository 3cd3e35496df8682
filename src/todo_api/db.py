from __future__ import annotations

from typing import Any, Callable

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import InvalidIdentifier, StoreUnavailable
from .logging_config import get_logger
from .settings import Settings

logger = get_logger(__name__)

# Signature shared by pymongo.MongoClient and test doubles such as mongomock.MongoClient.
ClientFactory = Callable[..., Any]


# PUBLIC_INTERFACE
def connect(settings: Settings, client_factory: ClientFactory = MongoClient) -> MongoClient:
    """
    Open the store client and verify the server answers before serving requests.

    Raises:
        StoreUnavailable: the store cannot be reached. Callers treat this as fatal.
    """
    client = client_factory(
        settings.mongo_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
    )
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreUnavailable("cannot connect to the document store", str(e)) from e
    logger.info("Connected to document store, collection %s.%s ready", settings.mongo_db, settings.mongo_collection)
    return client


# PUBLIC_INTERFACE
def get_collection(client: MongoClient, settings: Settings) -> Collection:
    """Return the collection holding todo documents."""
    return client[settings.mongo_db][settings.mongo_collection]


# PUBLIC_INTERFACE
def parse_identifier(raw: str) -> ObjectId:
    """
    Parse the wire form of a todo id (24 hex characters) into an ObjectId.

    Surrounding whitespace is ignored. Raises InvalidIdentifier for anything
    else so malformed ids never reach the store.
    """
    value = raw.strip()
    try:
        # ObjectId() also accepts 12-byte strings; only the hex form is valid on the wire.
        if len(value) != 24:
            raise InvalidId(value)
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise InvalidIdentifier(raw) from e
