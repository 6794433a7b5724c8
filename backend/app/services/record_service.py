"""
Record persistence in MongoDB: insert-if-absent for imports, paged search for
listing, and webhook upserts that skip unchanged records.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.database import Database, get_database
from app.models.record import Record, comparable

logger = logging.getLogger(__name__)

# Fields matched by the free-text search, besides id and name.
SEARCH_FIELDS = ("id", "name", "fields.industry", "fields.domain")


@dataclass
class RecordPage:
    records: list[dict[str, Any]]
    next_cursor: int | None


@dataclass
class UpsertResult:
    status: str  # 'created' | 'updated' | 'unchanged'
    document: dict[str, Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def serialize_document(document: dict[str, Any]) -> dict[str, Any]:
    """Make a stored document JSON friendly (_id and datetimes as strings)."""
    out: dict[str, Any] = {}
    for key, value in document.items():
        if key == "_id":
            out[key] = str(value)
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


class RecordService:
    def __init__(self, database: Database) -> None:
        self._database = database

    def insert_if_absent(self, record: Record) -> bool:
        """
        Insert the record unless one with the same (customerId, id, recordType) exists.
        Returns True when a new document was created.
        """
        now = _now()
        document = record.to_document()
        document["createdAt"] = now
        document["updatedAt"] = now
        try:
            result = self._database.records.update_one(
                record.natural_key(),
                {"$setOnInsert": document},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent insert of the same natural key won the race.
            return False
        return result.upserted_id is not None

    def find_one(self, customer_id: str, record_id: str, record_type: str) -> dict[str, Any] | None:
        return self._database.records.find_one(
            {"customerId": customer_id, "id": record_id, "recordType": record_type}
        )

    def build_query(
        self,
        customer_id: str,
        record_type: str,
        integration_key: str | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        query: dict[str, Any] = {"customerId": customer_id, "recordType": record_type}
        if integration_key:
            query["integrationKey"] = integration_key
        if search and search.strip():
            pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
            query["$or"] = [{field: pattern} for field in SEARCH_FIELDS]
        return query

    def list_page(
        self,
        customer_id: str,
        record_type: str,
        *,
        offset: int = 0,
        page_size: int = 100,
        integration_key: str | None = None,
        search: str | None = None,
    ) -> RecordPage:
        """One page ordered by _id; fetches page_size + 1 to know whether more exist."""
        query = self.build_query(customer_id, record_type, integration_key, search)
        docs = list(
            self._database.records.find(query)
            .sort("_id", ASCENDING)
            .skip(offset)
            .limit(page_size + 1)
        )
        has_more = len(docs) > page_size
        docs = docs[:page_size]
        return RecordPage(
            records=[serialize_document(d) for d in docs],
            next_cursor=offset + page_size if has_more else None,
        )

    def upsert(self, record: Record) -> UpsertResult:
        """
        Write a pushed record. Skips the write when applying the incoming fields
        to the stored document would not change it, ignoring volatile fields.
        """
        existing = self.find_one(record.customer_id, record.id, record.record_type)
        incoming = record.to_document()
        if existing is not None and comparable({**existing, **incoming}) == comparable(existing):
            logger.info("Record unchanged, skipping update: %s", record.id)
            return UpsertResult(status="unchanged", document=existing)

        now = _now()
        to_set = dict(incoming)
        to_set["updatedTime"] = now.isoformat()
        to_set["updatedAt"] = now
        # Optional fields missing from the payload keep their stored values.
        document = self._database.records.find_one_and_update(
            record.natural_key(),
            {"$set": to_set, "$setOnInsert": {"createdAt": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return UpsertResult(status="updated" if existing is not None else "created", document=document)


def get_record_service(database: Database = Depends(get_database)) -> RecordService:
    """Dependency: return a RecordService bound to the process database."""
    return RecordService(database)
