"""
Pydantic models for per-customer field schemas (fieldschemas collection).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Field types accepted from the schema editor."""
    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    EMAIL = "email"
    PHONE = "phone"
    CURRENCY = "currency"
    DATE = "date"
    SELECT = "select"


# Editor types stored as a string with a format of the same name.
FORMATTED_TYPES = {FieldType.EMAIL, FieldType.PHONE, FieldType.CURRENCY, FieldType.DATE}


class FieldDescriptor(BaseModel):
    """JSON-schema style description of one field."""
    model_config = ConfigDict(extra="ignore")

    type: str
    title: str
    format: str | None = None
    enum: list[str] | None = None
    default: Any = None

    @classmethod
    def from_input(
        cls,
        field_type: FieldType,
        title: str,
        enum: list[str] | None = None,
        default: Any = None,
    ) -> "FieldDescriptor":
        if field_type == FieldType.SELECT:
            return cls(type="string", title=title, enum=enum or None, default=default or None)
        if field_type in FORMATTED_TYPES:
            return cls(type="string", title=title, format=field_type.value, default=default or None)
        return cls(type=field_type.value, title=title, default=default or None)

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(exclude_none=True)
        if not doc.get("enum"):
            doc.pop("enum", None)
        return doc


class FieldSchema(BaseModel):
    """Schema for one (customer, record type)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    customer_id: str
    record_type: str
    properties: dict[str, FieldDescriptor] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def set_field(self, name: str, descriptor: FieldDescriptor, required: bool = False) -> None:
        self.properties[name] = descriptor
        if required and name not in self.required:
            self.required.append(name)

    def remove_field(self, name: str) -> None:
        self.properties.pop(name, None)
        self.required = [n for n in self.required if n != name]

    def to_document(self) -> dict[str, Any]:
        return {
            "customerId": self.customer_id,
            "recordType": self.record_type,
            "properties": {k: v.to_document() for k, v in self.properties.items()},
            "required": list(self.required),
        }

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {k: v.to_document() for k, v in self.properties.items()},
            "required": list(self.required),
        }
