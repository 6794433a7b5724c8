"""
Pydantic model for documents in the records collection (MongoDB).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Keys that change on every write; ignored when deciding whether a record changed.
VOLATILE_FIELDS = ("_id", "__v", "updatedTime", "createdAt", "updatedAt")

UNNAMED_RECORD = "Unnamed Record"


class Record(BaseModel):
    """A record imported from an integration. Unknown top-level keys are dropped."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    created_time: str | None = None
    updated_time: str | None = None
    uri: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    record_type: str
    customer_id: str
    integration_key: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("name", "created_time", "updated_time", "uri", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("fields", mode="before")
    @classmethod
    def coerce_fields(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @classmethod
    def from_source(
        cls,
        raw: dict[str, Any],
        *,
        customer_id: str,
        record_type: str,
        integration_key: str | None,
    ) -> "Record":
        """Build a record from an integration payload, scoped to a customer and record type."""
        data = dict(raw)
        rid = data.get("id")
        data["name"] = data.get("name") or (str(rid) if rid not in (None, "") else UNNAMED_RECORD)
        data["customerId"] = customer_id
        data["recordType"] = record_type
        data["integrationKey"] = integration_key
        for key in ("customer_id", "record_type", "integration_key"):
            data.pop(key, None)
        return cls.model_validate(data)

    def natural_key(self) -> dict[str, str]:
        return {"customerId": self.customer_id, "id": self.id, "recordType": self.record_type}

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def comparable(document: dict[str, Any]) -> dict[str, Any]:
    """Document without volatile keys, normalised through the Record shape."""
    stripped = {k: v for k, v in document.items() if k not in VOLATILE_FIELDS}
    return Record.model_validate(stripped).to_document()
