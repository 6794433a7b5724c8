"""
Schema editor API: field input and JSON-schema response.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldInput(BaseModel):
    """A field to add. type is an editor type (string, email, select, ...)."""
    name: str | None = None
    title: str | None = None
    type: str | None = None
    required: bool = False
    enum: list[str] | None = None
    default: Any = None


class AddFieldRequest(BaseModel):
    field: FieldInput | None = None


class DeleteFieldRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_name: str | None = Field(None, alias="fieldName")


class JsonSchema(BaseModel):
    type: str = "object"
    properties: dict[str, dict[str, Any]]
    required: list[str]


class SchemaResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: JsonSchema = Field(alias="schema")
