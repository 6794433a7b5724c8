"""
Integration list operations: summaries, actions, per-action instance creation
and disconnect.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends

from app.services.integration_app_service import (
    IntegrationAppService,
    IntegrationAppServiceError,
    get_integration_app_service,
)

logger = logging.getLogger(__name__)


class IntegrationNotFoundError(Exception):
    def __init__(self, integration_key: str) -> None:
        self.integration_key = integration_key
        super().__init__(f"Integration not found: {integration_key}")


class IntegrationNotConnectedError(Exception):
    def __init__(self, integration_key: str) -> None:
        self.integration_key = integration_key
        super().__init__(f"No connection found for integration: {integration_key}")


@dataclass
class SyncActionsResult:
    integration_key: str
    actions_count: int = 0
    created: list[str] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)


def connection_id_of(integration: dict[str, Any]) -> str | None:
    connection = integration.get("connection") or {}
    cid = connection.get("id")
    return str(cid) if cid else None


class IntegrationSyncService:
    def __init__(self, integration_app: IntegrationAppService) -> None:
        self._integration_app = integration_app

    def list_integrations(self) -> list[dict[str, Any]]:
        return self._integration_app.list_integrations()

    def get_integration(self, integration_key: str) -> dict[str, Any]:
        integration = self._integration_app.find_integration(integration_key)
        if integration is None:
            raise IntegrationNotFoundError(integration_key)
        return integration

    def list_actions(self, integration_key: str) -> list[dict[str, Any]]:
        integration = self.get_integration(integration_key)
        return self._integration_app.list_actions(str(integration.get("id") or ""))

    def sync_actions(self, integration_key: str) -> SyncActionsResult:
        """
        Get or create the instance of every action on the integration's connection.
        A failing action is logged and reported; the others still run.
        """
        integration = self.get_integration(integration_key)
        connection_id = connection_id_of(integration)
        if not connection_id:
            raise IntegrationNotConnectedError(integration_key)

        result = SyncActionsResult(integration_key=integration_key)
        actions = self._integration_app.list_actions(str(integration.get("id") or ""))
        result.actions_count = len(actions)
        if not actions:
            logger.info("No actions found for integration: %s", integration_key)
            return result

        logger.info("Found %d actions for %s", len(actions), integration_key)
        for action in actions:
            key = action.get("key")
            if not key:
                continue
            try:
                self._integration_app.get_action_instance(connection_id, key, auto_create=True)
                result.created.append(key)
                logger.info("Action instance created for: %s", key)
            except IntegrationAppServiceError as e:
                logger.error("Failed to create action instance for %s: %s", key, e.message)
                result.failed.append({"key": key, "error": e.message})
        return result

    def disconnect(self, integration_key: str) -> str:
        """Archive the integration's connection; returns the archived connection id."""
        integration = self.get_integration(integration_key)
        connection_id = connection_id_of(integration)
        if not connection_id:
            raise IntegrationNotConnectedError(integration_key)
        self._integration_app.archive_connection(connection_id)
        logger.info("Connection %s archived for %s", connection_id, integration_key)
        return connection_id


def get_integration_sync_service(
    integration_app: IntegrationAppService = Depends(get_integration_app_service),
) -> IntegrationSyncService:
    """Dependency: return an IntegrationSyncService for the current customer."""
    return IntegrationSyncService(integration_app)
