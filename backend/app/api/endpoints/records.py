"""
Records endpoints: import from the connected integration, and list/search the cache.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.core.config import Settings, get_settings
from app.core.constants import requires_instance_key, resolve_record_type
from app.core.errors import APIError
from app.core.security import AuthContext, get_current_auth, get_current_customer_id
from app.schemas.common import ErrorResponse
from app.schemas.record import ImportFailureResponse, ImportResponse, RecordListResponse
from app.services.import_service import ImportService
from app.services.integration_app_service import (
    IntegrationAppService,
    IntegrationAppServiceError,
    get_integration_app_service,
)
from app.services.record_service import RecordService, get_record_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/records",
    tags=["records"],
    responses={code: {"model": ErrorResponse} for code in (400, 401, 500)},
)


def _require_action(action: str | None, instance_key: str | None) -> str:
    if not action or not action.strip():
        raise APIError("Action key is required", status_code=status.HTTP_400_BAD_REQUEST)
    action = action.strip()
    if requires_instance_key(action) and not instance_key:
        raise APIError(
            "Instance key is required for custom forms and get-objects",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return action


def _parse_cursor(cursor: str | None) -> int:
    if cursor is None or cursor == "":
        return 0
    try:
        offset = int(cursor)
    except ValueError:
        raise APIError("Invalid cursor", status_code=status.HTTP_400_BAD_REQUEST)
    if offset < 0:
        raise APIError("Invalid cursor", status_code=status.HTTP_400_BAD_REQUEST)
    return offset


@router.get(
    "/import",
    response_model=ImportResponse | ImportFailureResponse,
    summary="Import records",
    description="Pull records from the customer's connection (following cursors) and cache new ones.",
)
async def import_records(
    auth: AuthContext = Depends(get_current_auth),
    action: str | None = Query(None, description="Action key, e.g. get-leads"),
    instance_key: str | None = Query(None, alias="instanceKey"),
    integration_key: str | None = Query(None, alias="integrationKey"),
    integration_app: IntegrationAppService = Depends(get_integration_app_service),
    records: RecordService = Depends(get_record_service),
    settings: Settings = Depends(get_settings),
) -> ImportResponse | ImportFailureResponse:
    """GET /api/records/import — import all pages of an action into the cache."""
    action = _require_action(action, instance_key)
    record_type = resolve_record_type(action, instance_key)
    try:
        connection = integration_app.find_connection(integration_key)
        if connection is None:
            message = (
                f"No connection found for integration: {integration_key}"
                if integration_key
                else "No connection found"
            )
            return ImportFailureResponse(error=message)
        logger.info(
            "Importing %s into %s from connection %s",
            action,
            record_type,
            (connection.get("integration") or {}).get("key"),
        )
        importer = ImportService(
            integration_app,
            records,
            max_pages=settings.import_max_pages,
            max_seconds=settings.import_max_seconds,
        )
        result = importer.run(
            connection,
            customer_id=auth.customer_id,
            action_key=action,
            record_type=record_type,
            instance_key=instance_key,
            integration_key=integration_key,
        )
    except IntegrationAppServiceError as e:
        logger.error("Error in import: %s", e.message)
        raise APIError(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=e.message,
        )
    return ImportResponse(
        records_count=result.records_count,
        new_records_count=result.new_records_count,
        existing_records_count=result.existing_records_count,
    )


@router.get(
    "",
    response_model=RecordListResponse,
    summary="List records",
    description="Paginated list of cached records. Filter by integration and free-text search.",
)
async def list_records(
    customer_id: str = Depends(get_current_customer_id),
    action: str | None = Query(None, description="Action key, e.g. get-leads"),
    instance_key: str | None = Query(None, alias="instanceKey"),
    cursor: str | None = Query(None, description="Row offset returned by the previous page"),
    search: str | None = Query(None, description="Case-insensitive match on id, name, industry, domain"),
    integration_key: str | None = Query(None, alias="integrationKey"),
    records: RecordService = Depends(get_record_service),
    settings: Settings = Depends(get_settings),
) -> RecordListResponse:
    """GET /api/records — one page of records, with the cursor of the next page."""
    action = _require_action(action, instance_key)
    offset = _parse_cursor(cursor)
    page = records.list_page(
        customer_id,
        resolve_record_type(action, instance_key),
        offset=offset,
        page_size=settings.records_page_size,
        integration_key=integration_key,
        search=search,
    )
    return RecordListResponse(
        records=page.records,
        cursor=str(page.next_cursor) if page.next_cursor is not None else None,
    )
