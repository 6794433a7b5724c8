"""
Webhook receiver: keeps cached records fresh when the integration pushes a change.
"""

import logging

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from app.core.errors import APIError
from app.models.record import Record
from app.schemas.common import ErrorResponse
from app.schemas.record import WebhookPayload, WebhookResponse
from app.services.record_service import RecordService, get_record_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/webhooks",
    tags=["webhooks"],
    responses={400: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=WebhookResponse,
    summary="Receive record webhook",
    description="Create or update one record. Unchanged records are not written.",
)
async def receive_webhook(
    payload: WebhookPayload,
    records: RecordService = Depends(get_record_service),
) -> WebhookResponse:
    """POST /api/webhooks — upsert the pushed record by (customerId, id, recordType)."""
    data = payload.data or {}
    record_id = data.get("id")
    logger.info(
        "Received webhook payload: customer=%s record=%s type=%s integration=%s",
        payload.customer_id,
        record_id,
        payload.record_type,
        payload.integration_key,
    )
    if not payload.customer_id or not payload.record_type or record_id in (None, ""):
        raise APIError("Missing required fields", status_code=status.HTTP_400_BAD_REQUEST)

    integration_key = payload.resolved_integration_key()
    if integration_key and not payload.integration_key:
        logger.info("Determined integration key from connection: %s", integration_key)

    try:
        record = Record.from_source(
            data,
            customer_id=payload.customer_id,
            record_type=payload.record_type,
            integration_key=integration_key,
        )
    except ValidationError as e:
        raise APIError(
            "Invalid record data",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[err["msg"] for err in e.errors()],
        )

    result = records.upsert(record)
    logger.info(
        "Record %s: id=%s _id=%s customer=%s type=%s integration=%s",
        result.status,
        record.id,
        result.document.get("_id"),
        record.customer_id,
        record.record_type,
        integration_key,
    )
    return WebhookResponse(
        record_id=record.id,
        id_=str(result.document.get("_id")),
        customer_id=record.customer_id,
        record_type=record.record_type,
        integration_key=integration_key,
        status=result.status,
    )
