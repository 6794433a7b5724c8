"""
Form endpoints. A stored form definition enables schema editing for its record type.
"""

import logging

from fastapi import APIRouter, Depends, status

from app.core.errors import APIError
from app.core.security import get_current_customer_id
from app.models.form import FormDefinition
from app.schemas.common import ErrorResponse
from app.schemas.form import Form, FormCreate, FormListResponse
from app.services.form_service import FormService, get_form_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/forms",
    tags=["forms"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)


@router.get(
    "",
    response_model=FormListResponse,
    summary="List forms",
    description="Default forms plus the customer's custom forms.",
)
async def list_forms(
    customer_id: str = Depends(get_current_customer_id),
    forms: FormService = Depends(get_form_service),
) -> FormListResponse:
    return FormListResponse(
        forms=[Form.model_validate(f, from_attributes=True) for f in forms.list_forms(customer_id)]
    )


@router.post(
    "",
    response_model=Form,
    status_code=status.HTTP_201_CREATED,
    summary="Create form",
)
async def create_form(
    body: FormCreate,
    customer_id: str = Depends(get_current_customer_id),
    forms: FormService = Depends(get_form_service),
) -> Form:
    """POST /api/forms — store a custom form; existing definitions are returned as-is."""
    if not body.form_id or not body.form_id.strip() or not body.form_title or not body.form_title.strip():
        raise APIError("formId and formTitle are required", status_code=status.HTTP_400_BAD_REQUEST)
    form = forms.create(
        FormDefinition(
            customer_id=customer_id,
            form_id=body.form_id.strip(),
            form_title=body.form_title.strip(),
        )
    )
    return Form.model_validate(form, from_attributes=True)


@router.post(
    "/defaults",
    response_model=FormListResponse,
    summary="Create default forms",
    description="Store the default form definitions for the customer.",
)
async def create_default_forms(
    customer_id: str = Depends(get_current_customer_id),
    forms: FormService = Depends(get_form_service),
) -> FormListResponse:
    created = forms.ensure_defaults(customer_id)
    return FormListResponse(forms=[Form.model_validate(f, from_attributes=True) for f in created])
