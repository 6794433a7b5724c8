"""
Record API schemas: import result, list page, webhook payload and result.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel


class ImportResponse(CamelModel):
    """Counts for one import run; new + existing == records."""
    success: bool = True
    records_count: int
    new_records_count: int
    existing_records_count: int


class ImportFailureResponse(BaseModel):
    success: Literal[False] = False
    error: str


class RecordListResponse(BaseModel):
    """One page of cached records. cursor is the next offset, or null on the last page."""
    records: list[dict[str, Any]]
    cursor: str | None = None


class WebhookConnection(BaseModel):
    model_config = ConfigDict(extra="allow")

    integration: dict[str, Any] | None = None


class WebhookPayload(BaseModel):
    """Push notification for one record. Required fields are checked by the handler."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    customer_id: str | None = None
    record_type: str | None = None
    integration_key: str | None = None
    connection: WebhookConnection | None = None
    data: dict[str, Any] | None = None

    def resolved_integration_key(self) -> str | None:
        if self.integration_key:
            return self.integration_key
        if self.connection and self.connection.integration:
            return self.connection.integration.get("key")
        return None


class WebhookResponse(CamelModel):
    success: bool = True
    record_id: str
    id_: str = Field(alias="_id")
    customer_id: str
    record_type: str
    integration_key: str | None = None
    status: Literal["created", "updated", "unchanged"]
