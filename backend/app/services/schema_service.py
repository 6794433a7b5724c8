"""
Per-customer field schemas: seeded from the defaults on first use, extended
with custom fields, with default fields protected from deletion.
"""

import logging
from copy import deepcopy

from fastapi import Depends
from pymongo import ReturnDocument

from app.core.database import Database, get_database
from app.core.default_schemas import core_field_names, get_default_schema
from app.models.field_schema import FieldDescriptor, FieldSchema

logger = logging.getLogger(__name__)


class SchemaServiceError(Exception):
    """Raised when a schema change is not allowed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SchemaService:
    def __init__(self, database: Database) -> None:
        self._database = database

    def get(self, customer_id: str, record_type: str) -> FieldSchema | None:
        doc = self._database.field_schemas.find_one({"customerId": customer_id, "recordType": record_type})
        if doc is None:
            return None
        return FieldSchema.model_validate(doc)

    def get_or_create(self, customer_id: str, record_type: str) -> FieldSchema:
        """Stored schema, or a new one copied from the record type's defaults."""
        default = deepcopy(get_default_schema(record_type))
        seed = FieldSchema(
            customer_id=customer_id,
            record_type=record_type,
            properties=default["properties"],
            required=default["required"],
        )
        doc = self._database.field_schemas.find_one_and_update(
            {"customerId": customer_id, "recordType": record_type},
            {"$setOnInsert": seed.to_document()},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return FieldSchema.model_validate(doc)

    def _save(self, schema: FieldSchema) -> None:
        doc = schema.to_document()
        self._database.field_schemas.update_one(
            {"customerId": schema.customer_id, "recordType": schema.record_type},
            {"$set": {"properties": doc["properties"], "required": doc["required"]}},
        )

    def add_field(
        self,
        customer_id: str,
        record_type: str,
        name: str,
        descriptor: FieldDescriptor,
        required: bool = False,
    ) -> FieldSchema:
        schema = self.get_or_create(customer_id, record_type)
        schema.set_field(name, descriptor, required=required)
        self._save(schema)
        logger.info("Field %s added to %s schema for %s", name, record_type, customer_id)
        return schema

    def delete_field(self, schema: FieldSchema, name: str) -> FieldSchema:
        if name in core_field_names(schema.record_type):
            raise SchemaServiceError(f"Cannot delete core field from {schema.record_type} schema")
        schema.remove_field(name)
        self._save(schema)
        logger.info("Field %s removed from %s schema for %s", name, schema.record_type, schema.customer_id)
        return schema


def get_schema_service(database: Database = Depends(get_database)) -> SchemaService:
    """Dependency: return a SchemaService bound to the process database."""
    return SchemaService(database)
