"""
MongoDB access: one process-scoped client, created in the app lifespan and
injected into handlers with Depends(get_database).
"""

import logging
from typing import Any

from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database as MongoDatabase

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

RECORDS_COLLECTION = "records"
FIELD_SCHEMAS_COLLECTION = "fieldschemas"
FORM_DEFINITIONS_COLLECTION = "formdefinitions"

# Driver options: fail fast on server selection, drop idle sockets.
CLIENT_OPTIONS: dict[str, Any] = {
    "serverSelectionTimeoutMS": 5000,
    "socketTimeoutMS": 45000,
}


class Database:
    """
    Holds the MongoClient for the process. The client is created on first use
    and indexes are ensured once, the first time a collection is requested.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        client: MongoClient | None = None,
    ) -> None:
        self._uri = uri
        self._db_name = db_name
        self._client = client
        self._indexes_ready = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        settings = settings or get_settings()
        return cls(settings.mongodb_uri, settings.mongodb_database_name)

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(self._uri, **CLIENT_OPTIONS)
            logger.info("MongoDB client created for database %s", self._db_name)
        return self._client

    @property
    def db(self) -> MongoDatabase:
        return self.client[self._db_name]

    def _collection(self, name: str) -> Collection:
        if not self._indexes_ready:
            self.ensure_indexes()
        return self.db[name]

    @property
    def records(self) -> Collection:
        return self._collection(RECORDS_COLLECTION)

    @property
    def field_schemas(self) -> Collection:
        return self._collection(FIELD_SCHEMAS_COLLECTION)

    @property
    def form_definitions(self) -> Collection:
        return self._collection(FORM_DEFINITIONS_COLLECTION)

    def ensure_indexes(self) -> None:
        """Create indexes; the natural keys are unique so upserts cannot duplicate."""
        records = self.db[RECORDS_COLLECTION]
        records.create_index(
            [("customerId", ASCENDING), ("id", ASCENDING), ("recordType", ASCENDING)],
            unique=True,
            name="record_natural_key",
        )
        records.create_index([("customerId", ASCENDING)])
        records.create_index([("recordType", ASCENDING)])
        records.create_index([("integrationKey", ASCENDING)])
        records.create_index([("customerId", ASCENDING), ("recordType", ASCENDING)])
        records.create_index(
            [("customerId", ASCENDING), ("recordType", ASCENDING), ("integrationKey", ASCENDING)]
        )
        self.db[FIELD_SCHEMAS_COLLECTION].create_index(
            [("customerId", ASCENDING), ("recordType", ASCENDING)],
            unique=True,
        )
        self.db[FORM_DEFINITIONS_COLLECTION].create_index(
            [("customerId", ASCENDING), ("formId", ASCENDING)],
            unique=True,
        )
        self._indexes_ready = True
        logger.info("MongoDB indexes ensured")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._indexes_ready = False
            logger.info("MongoDB client closed")


def get_database(request: Request) -> Database:
    """Dependency: the Database created by the app lifespan."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        database = Database.from_settings()
        request.app.state.database = database
    return database
