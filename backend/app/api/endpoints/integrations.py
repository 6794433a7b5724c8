"""
Integrations endpoints used by the Integrations page: list, actions,
per-action instance sync, and disconnect.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from app.core.errors import APIError
from app.core.security import get_current_customer_id
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.integration import (
    ActionListResponse,
    ActionSummary,
    FailedAction,
    IntegrationListResponse,
    IntegrationSummary,
    SyncActionsResponse,
)
from app.services.integration_app_service import IntegrationAppServiceError
from app.services.integration_sync_service import (
    IntegrationNotConnectedError,
    IntegrationNotFoundError,
    IntegrationSyncService,
    connection_id_of,
    get_integration_sync_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/integrations",
    tags=["integrations"],
    responses={code: {"model": ErrorResponse} for code in (400, 401, 404, 502)},
)


def _to_summary(integration: dict[str, Any]) -> IntegrationSummary:
    connection_id = connection_id_of(integration)
    return IntegrationSummary(
        id=str(integration.get("id") or ""),
        key=integration.get("key") or "",
        name=integration.get("name") or integration.get("key") or "",
        logo_uri=integration.get("logoUri"),
        connected=connection_id is not None,
        connection_id=connection_id,
    )


def _upstream_error(e: IntegrationAppServiceError) -> APIError:
    logger.warning("Integration.app error: %s", e.message)
    return APIError(
        e.message or "Integration.app error",
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


@router.get(
    "",
    response_model=IntegrationListResponse,
    summary="List integrations",
)
async def list_integrations(
    _customer_id: str = Depends(get_current_customer_id),
    sync: IntegrationSyncService = Depends(get_integration_sync_service),
) -> IntegrationListResponse:
    try:
        integrations = sync.list_integrations()
    except IntegrationAppServiceError as e:
        raise _upstream_error(e)
    return IntegrationListResponse(integrations=[_to_summary(i) for i in integrations])


@router.get(
    "/{integration_key}/actions",
    response_model=ActionListResponse,
    summary="List integration actions",
)
async def list_actions(
    integration_key: str,
    sync: IntegrationSyncService = Depends(get_integration_sync_service),
    _customer_id: str = Depends(get_current_customer_id),
) -> ActionListResponse:
    try:
        actions = sync.list_actions(integration_key)
    except IntegrationNotFoundError as e:
        raise APIError(str(e), status_code=status.HTTP_404_NOT_FOUND)
    except IntegrationAppServiceError as e:
        raise _upstream_error(e)
    return ActionListResponse(
        actions=[
            ActionSummary(id=a.get("id"), key=a["key"], name=a.get("name"))
            for a in actions
            if a.get("key")
        ]
    )


@router.post(
    "/{integration_key}/sync-actions",
    response_model=SyncActionsResponse,
    summary="Sync action instances",
    description="Create the instance of every action on the integration's connection.",
)
async def sync_actions(
    integration_key: str,
    sync: IntegrationSyncService = Depends(get_integration_sync_service),
    _customer_id: str = Depends(get_current_customer_id),
) -> SyncActionsResponse:
    try:
        result = sync.sync_actions(integration_key)
    except IntegrationNotFoundError as e:
        raise APIError(str(e), status_code=status.HTTP_404_NOT_FOUND)
    except IntegrationNotConnectedError as e:
        raise APIError(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except IntegrationAppServiceError as e:
        raise _upstream_error(e)
    return SyncActionsResponse(
        integration_key=result.integration_key,
        actions_count=result.actions_count,
        created=result.created,
        failed=[FailedAction(**f) for f in result.failed],
    )


@router.delete(
    "/{integration_key}/connection",
    response_model=MessageResponse,
    summary="Disconnect integration",
)
async def disconnect(
    integration_key: str,
    sync: IntegrationSyncService = Depends(get_integration_sync_service),
    _customer_id: str = Depends(get_current_customer_id),
) -> MessageResponse:
    try:
        sync.disconnect(integration_key)
    except IntegrationNotFoundError as e:
        raise APIError(str(e), status_code=status.HTTP_404_NOT_FOUND)
    except IntegrationNotConnectedError as e:
        raise APIError(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except IntegrationAppServiceError as e:
        raise _upstream_error(e)
    return MessageResponse(message=f"Disconnected {integration_key}")
