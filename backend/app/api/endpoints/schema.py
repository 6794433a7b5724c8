"""
Schema editor endpoints: read, add and delete fields of a customer's record-type schema.
The web app edits AI_Engagement_Conversation__c; any record type with a form is accepted.
"""

import logging

from fastapi import APIRouter, Body, Depends, status

from app.core.constants import default_form_title
from app.core.errors import APIError
from app.models.field_schema import FieldDescriptor, FieldSchema, FieldType
from app.schemas.common import ErrorResponse
from app.schemas.field import AddFieldRequest, DeleteFieldRequest, FieldInput, SchemaResponse
from app.services.form_service import FormService, get_form_service
from app.services.schema_service import SchemaService, SchemaServiceError, get_schema_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/schema",
    tags=["schema"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def _schema_response(schema: FieldSchema) -> SchemaResponse:
    return SchemaResponse.model_validate({"schema": schema.to_json_schema()})


def _require_form(forms: FormService, customer_id: str, record_type: str) -> None:
    if forms.exists(customer_id, record_type):
        return
    title = default_form_title(record_type) or record_type
    raise APIError(f"{title} form not found", status_code=status.HTTP_404_NOT_FOUND)


def _field_type(field: FieldInput) -> FieldType:
    try:
        return FieldType(field.type)
    except ValueError:
        raise APIError("Invalid field data", status_code=status.HTTP_400_BAD_REQUEST)


def _valid_field_name(name: str) -> bool:
    # Field names become MongoDB keys.
    return not name.startswith("$") and "." not in name


@router.get(
    "/{record_type}/{user_id}",
    response_model=SchemaResponse,
    summary="Get schema",
    description="Customer schema for a record type, created from the defaults on first read.",
)
async def get_schema(
    record_type: str,
    user_id: str,
    forms: FormService = Depends(get_form_service),
    schemas: SchemaService = Depends(get_schema_service),
) -> SchemaResponse:
    _require_form(forms, user_id, record_type)
    schema = schemas.get_or_create(user_id, record_type)
    return _schema_response(schema)


@router.post(
    "/{record_type}/{user_id}",
    response_model=SchemaResponse,
    summary="Add field",
)
async def add_field(
    record_type: str,
    user_id: str,
    body: AddFieldRequest = Body(...),
    forms: FormService = Depends(get_form_service),
    schemas: SchemaService = Depends(get_schema_service),
) -> SchemaResponse:
    """POST /api/schema/{record_type}/{user_id} — add or replace a custom field."""
    field = body.field
    if not field or not field.name or not field.type or not field.title:
        raise APIError("Invalid field data", status_code=status.HTTP_400_BAD_REQUEST)
    if not _valid_field_name(field.name):
        raise APIError("Invalid field data", status_code=status.HTTP_400_BAD_REQUEST)
    field_type = _field_type(field)
    if field_type == FieldType.SELECT and not field.enum:
        raise APIError("Select fields must have options", status_code=status.HTTP_400_BAD_REQUEST)

    _require_form(forms, user_id, record_type)
    descriptor = FieldDescriptor.from_input(field_type, field.title, enum=field.enum, default=field.default)
    schema = schemas.add_field(user_id, record_type, field.name, descriptor, required=field.required)
    return _schema_response(schema)


@router.delete(
    "/{record_type}/{user_id}",
    response_model=SchemaResponse,
    summary="Delete field",
    description="Remove a custom field. Fields of the default schema cannot be deleted.",
)
async def delete_field(
    record_type: str,
    user_id: str,
    body: DeleteFieldRequest = Body(...),
    forms: FormService = Depends(get_form_service),
    schemas: SchemaService = Depends(get_schema_service),
) -> SchemaResponse:
    _require_form(forms, user_id, record_type)
    schema = schemas.get(user_id, record_type)
    if schema is None:
        title = default_form_title(record_type) or record_type
        raise APIError(f"{title} schema not found", status_code=status.HTTP_404_NOT_FOUND)
    if not body.field_name:
        raise APIError("Field name is required", status_code=status.HTTP_400_BAD_REQUEST)
    try:
        schema = schemas.delete_field(schema, body.field_name)
    except SchemaServiceError as e:
        raise APIError(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    return _schema_response(schema)
