# Pydantic request/response schemas (API contract). Kept in sync with frontend types.

from app.schemas.common import CamelModel, ErrorResponse, MessageResponse
from app.schemas.field import AddFieldRequest, DeleteFieldRequest, FieldInput, SchemaResponse
from app.schemas.form import Form, FormCreate, FormListResponse
from app.schemas.integration import (
    ActionListResponse,
    IntegrationListResponse,
    SyncActionsResponse,
)
from app.schemas.record import (
    ImportFailureResponse,
    ImportResponse,
    RecordListResponse,
    WebhookPayload,
    WebhookResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "ErrorResponse",
    "AddFieldRequest",
    "DeleteFieldRequest",
    "FieldInput",
    "SchemaResponse",
    "Form",
    "FormCreate",
    "FormListResponse",
    "ActionListResponse",
    "IntegrationListResponse",
    "SyncActionsResponse",
    "ImportFailureResponse",
    "ImportResponse",
    "RecordListResponse",
    "WebhookPayload",
    "WebhookResponse",
]
